import logging
from typing import Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel

from app.config import get_settings
from app.core.exceptions import AuthenticationError
from app.core.security import auth_enabled, session_token, verify_password
from app.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter()


class LoginRequest(BaseModel):
    password: Optional[str] = None


@router.post("/login", response_model=MessageResponse)
async def login(request: LoginRequest, response: Response):
    """
    Exchange the admin password for a session cookie.

    When no ADMIN_PASSWORD is configured the cookie is issued unconditionally.
    """
    if not verify_password(request.password):
        logger.warning("Rejected login attempt with wrong password")
        raise AuthenticationError("Wrong password")

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=session_token(),
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )

    if not auth_enabled():
        return MessageResponse(message="No password configured")
    return MessageResponse(message="Logged in")


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Drop the session cookie."""
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")
