from fastapi import APIRouter, Depends

from app.api.v1 import (
    health,
    auth,
    projects,
    backlinks,
    expenses,
    analytics,
    export,
    resources,
    github_accounts,
)
from app.core.security import require_admin

api_router = APIRouter()

# Public
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Behind the admin cookie
protected = [Depends(require_admin)]
api_router.include_router(
    projects.router, prefix="/projects", tags=["projects"], dependencies=protected
)
api_router.include_router(
    backlinks.router, prefix="/backlinks", tags=["backlinks"], dependencies=protected
)
api_router.include_router(
    expenses.router, prefix="/expenses", tags=["expenses"], dependencies=protected
)
api_router.include_router(
    analytics.router, prefix="/analytics", tags=["analytics"], dependencies=protected
)
api_router.include_router(
    resources.router, prefix="/resources", tags=["resources"], dependencies=protected
)
api_router.include_router(
    github_accounts.router,
    prefix="/github-accounts",
    tags=["github-accounts"],
    dependencies=protected,
)
api_router.include_router(
    export.router, prefix="/export", tags=["export"], dependencies=protected
)
