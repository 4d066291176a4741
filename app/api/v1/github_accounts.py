import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.core.exceptions import ResourceNotFoundError
from app.db.repositories.github_account_repo import GitHubAccountRepository
from app.schemas.common import MessageResponse
from app.schemas.github_account import (
    GitHubAccountCreate,
    GitHubAccountUpdate,
    GitHubAccountResponse,
    GitHubAccountListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=GitHubAccountListResponse)
async def list_accounts(db: AsyncSession = Depends(get_db)):
    """List GitHub accounts, most recently updated first. Tokens are masked."""
    accounts = await GitHubAccountRepository(db).get_all()
    return GitHubAccountListResponse(
        accounts=[GitHubAccountResponse.model_validate(a) for a in accounts],
        total=len(accounts),
    )


@router.post("", response_model=GitHubAccountResponse, status_code=201)
async def create_account(data: GitHubAccountCreate, db: AsyncSession = Depends(get_db)):
    """Store a GitHub account and its access token."""
    account = await GitHubAccountRepository(db).create(**data.model_dump())
    logger.info(f"Created GitHub account {account.id} ({account.username})")
    return GitHubAccountResponse.model_validate(account)


@router.get("/{account_id}", response_model=GitHubAccountResponse)
async def get_account(account_id: int, db: AsyncSession = Depends(get_db)):
    """Get a specific GitHub account by ID."""
    account = await GitHubAccountRepository(db).get_by_id(account_id)
    if not account:
        raise ResourceNotFoundError(f"GitHub account {account_id} not found")
    return GitHubAccountResponse.model_validate(account)


@router.put("/{account_id}", response_model=GitHubAccountResponse)
async def update_account(
    account_id: int,
    data: GitHubAccountUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an account; send ``token`` only to replace it."""
    account = await GitHubAccountRepository(db).update(
        account_id, **data.model_dump(exclude_unset=True)
    )
    if not account:
        raise ResourceNotFoundError(f"GitHub account {account_id} not found")
    return GitHubAccountResponse.model_validate(account)


@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_account(account_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an account. Projects using it are kept and lose the link."""
    deleted = await GitHubAccountRepository(db).delete(account_id)
    if not deleted:
        raise ResourceNotFoundError(f"GitHub account {account_id} not found")
    return MessageResponse(message="GitHub account deleted successfully")
