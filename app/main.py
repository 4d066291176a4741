import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.exceptions import (
    InvalidRange,
    UnsupportedGranularity,
    ResourceNotFoundError,
    AuthenticationError,
)
from app.api.v1.router import api_router
from app.db.session import init_db

settings = get_settings()

# Configure logging - suppress noisy third-party loggers
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Silence noisy third-party libraries
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Portfolio Backend...")
    await init_db()
    yield
    # Shutdown
    logger.info("Shutting down Portfolio Backend...")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
## Portfolio API

Management backend for a portfolio of websites.

### Features
- **Projects**: Track sites, their domains, hosting and monetization, with a health status
- **Backlinks**: Log backlinks per project and follow them from planned to live
- **Expenses**: Record costs per project or as global fixed costs, with upcoming renewals
- **Analytics**: Period summaries, trend buckets, category and cost-centre breakdowns

### Authentication
When `ADMIN_PASSWORD` is set, log in via `POST /api/v1/auth/login` to receive
the session cookie required by every other endpoint.
""",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "projects", "description": "Manage portfolio sites"},
        {"name": "backlinks", "description": "Manage backlinks"},
        {"name": "expenses", "description": "Manage expenses"},
        {"name": "analytics", "description": "Trends and breakdowns"},
        {"name": "export", "description": "Full data export"},
        {"name": "auth", "description": "Admin session"},
        {"name": "health", "description": "Health checks"},
    ],
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(InvalidRange)
async def invalid_range_exception_handler(request: Request, exc: InvalidRange):
    return JSONResponse(
        status_code=400,
        content={
            "error": "invalid_range",
            "message": exc.message,
            "details": {k: str(v) if v is not None else None for k, v in exc.details.items()},
        },
    )


@app.exception_handler(UnsupportedGranularity)
async def unsupported_granularity_exception_handler(
    request: Request, exc: UnsupportedGranularity
):
    logger.error(f"UnsupportedGranularity: {exc.message} (details={exc.details})")
    return JSONResponse(
        status_code=400,
        content={
            "error": "unsupported_granularity",
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(ResourceNotFoundError)
async def not_found_exception_handler(request: Request, exc: ResourceNotFoundError):
    return JSONResponse(
        status_code=404,
        content={
            "error": "not_found",
            "message": exc.message,
        },
    )


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(
        status_code=401,
        content={
            "error": "unauthorized",
            "message": exc.message,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTPExceptions with consistent format."""
    error_type = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        422: "validation_error",
    }.get(exc.status_code, "http_error")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error_type,
            "message": exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        },
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error occurred")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


# Root health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}
