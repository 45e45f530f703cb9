"""Database engine, session factory and request-scoped sessions."""

import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from peer360.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def _make_permissive_ssl_context() -> ssl.SSLContext:
    """For hosted PostgreSQL poolers that present self-signed chains."""
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def get_engine_url_and_connect_args(database_url: str) -> tuple[str, dict]:
    """
    Split a database URL into what the async driver accepts.

    asyncpg rejects ``sslmode``/``ssl`` query parameters, so they are removed
    and ``sslmode=require`` becomes an SSL context in ``connect_args``.
    """
    url = database_url
    connect_args: dict = {}
    if "sslmode=" in url or "ssl=" in url:
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        sslmode = (query.pop("sslmode", None) or [""])[0]
        query.pop("ssl", None)
        url = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
        if sslmode == "require":
            connect_args["ssl"] = _make_permissive_ssl_context()
    return url, connect_args


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """Async engine for ``database_url``; in-memory SQLite keeps one shared connection."""
    url, connect_args = get_engine_url_and_connect_args(database_url)
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(
            url,
            echo=echo,
            connect_args={**connect_args, "check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(url, echo=echo, connect_args=connect_args)


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine_for(settings.database_url, echo=settings.log_level == "DEBUG")
async_session_maker = create_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Session per request: committed when the handler returns, rolled back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
