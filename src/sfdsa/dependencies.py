"""Shared FastAPI dependencies."""

import secrets
from collections.abc import AsyncGenerator

from fastapi import Header, HTTPException

from sfdsa.config import get_settings
from sfdsa.email.service import EmailService, get_email_service
from sfdsa.redis_client import get_optional_redis


async def get_redis_dep() -> AsyncGenerator[object | None, None]:
    """Yield the Redis client (or None) as a FastAPI dependency."""
    yield get_optional_redis()


async def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """Gate admin-only endpoints behind the provisioned admin token.

    An unset ``admin_api_token`` disables every admin endpoint.
    """
    expected = get_settings().admin_api_token
    if not expected or not x_admin_token:
        raise HTTPException(status_code=403, detail="Admin access required")
    if not secrets.compare_digest(x_admin_token.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Admin access required")


def get_email_dep() -> EmailService:
    """Return the shared email service (overridden with a fake in tests)."""
    return get_email_service(get_optional_redis())
