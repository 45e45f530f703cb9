"""Helpers for tests that need a database or the HTTP app."""

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from peer360.config import settings
from peer360.database import Base, create_engine_for, create_session_maker, get_db
from peer360.main import create_app

SECRET = settings.encryption_key


async def make_engine(url: str = "sqlite+aiosqlite:///:memory:") -> AsyncEngine:
    """Fresh database with every table created; in-memory unless ``url`` says otherwise."""
    engine = create_engine_for(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


async def make_session_maker(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(await make_engine(url))


def build_test_app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    app = create_app()

    async def _override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    return app
