import hashlib
import hmac
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyCookie

from app.config import get_settings

settings = get_settings()

cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


def auth_enabled() -> bool:
    """Without an ADMIN_PASSWORD every request is let through (local development)."""
    return bool(settings.ADMIN_PASSWORD)


def session_token() -> str:
    """Cookie value proving the admin password was entered.

    Derived from the password so changing it logs every browser out.
    """
    key = (settings.ADMIN_PASSWORD or "").encode()
    return hmac.new(key, b"authenticated", hashlib.sha256).hexdigest()


def verify_password(password: Optional[str]) -> bool:
    if not auth_enabled():
        return True
    return secrets.compare_digest((password or "").encode(), settings.ADMIN_PASSWORD.encode())


async def require_admin(
    token: Optional[str] = Security(cookie_scheme),
) -> None:
    """
    Reject requests without a valid admin session cookie.

    This is used as a router-level FastAPI dependency.
    """
    if not auth_enabled():
        return

    if not token or not secrets.compare_digest(token, session_token()):
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
        )
