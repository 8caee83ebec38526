from __future__ import annotations

from functools import lru_cache
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from vidshare.config import settings


def build_engine(database_url: Optional[str] = None, **options: Any) -> AsyncEngine:
    """Create an engine for ``database_url``, defaulting to ``DATABASE_URL``.

    SQLite URLs skip the pre-ping and allow cross-thread use, since aiosqlite
    runs the connection on its own worker thread.
    """
    url = database_url or settings.DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    if url.startswith("sqlite"):
        options.setdefault("connect_args", {"check_same_thread": False})
    else:
        options.setdefault("pool_pre_ping", True)
    return create_async_engine(url, **options)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services read attributes after commit, so rows must stay loaded.
    return async_sessionmaker(engine, expire_on_commit=False)


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return make_session_factory(build_engine())


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session
