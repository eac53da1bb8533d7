"""
repokit.db.engine

Async SQLAlchemy engine helpers.

Responsibilities:
- Create the async engine from settings.
- Provide a transaction scope whose connection can be shared by several
  repositories so that their calls commit or roll back together.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from repokit.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    # pool_pre_ping helps detect stale connections in long-lived processes.
    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        echo=settings.echo_sql,
    )


@asynccontextmanager
async def transaction(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """
    Explicit transaction scope.

    Repositories constructed on the yielded connection run inside this
    transaction: everything commits when the block exits normally and rolls
    back if it raises.
    """

    async with engine.begin() as conn:
        yield conn


# --- Module Notes -----------------------------------------------------------
# Repositories constructed on the engine itself open a short transaction per call.
