"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from peer360.config import Settings, settings
from peer360.database import get_db
from peer360.security.rate_limit import AccessCodeRateLimiter


def get_settings() -> Settings:
    return settings


def get_rate_limiter(request: Request) -> AccessCodeRateLimiter:
    """Limiter owned by the running application (see ``create_app``)."""
    return request.app.state.rate_limiter


DbDep = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
RateLimiterDep = Annotated[AccessCodeRateLimiter, Depends(get_rate_limiter)]
