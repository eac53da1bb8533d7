"""
tests.conftest

Shared fixtures: a throwaway SQLite database (aiosqlite) with the tables the
repository tests operate on.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine

from repokit.db.engine import create_engine
from repokit.observability.logging import configure_from_settings
from repokit.settings import Settings

metadata = sa.MetaData()

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("email", sa.String(255), nullable=False, unique=True),
    sa.Column("password", sa.String(255), nullable=False),
    sa.Column("role", sa.String(64), nullable=False),
    sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
    sa.Column("updated_at", sa.DateTime, nullable=True),
)

organizations = sa.Table(
    "organizations",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("city", sa.String(255), nullable=False),
    sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
    sa.Column("modified_at", sa.DateTime, nullable=True),
)


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    configure_from_settings(Settings(env="test", service_name="repokit-test", log_level="WARNING"))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def user_data() -> dict[str, str]:
    return {"email": "luke@example.com", "password": "swordfish", "role": "admin"}


@pytest.fixture
def insert_user(engine: AsyncEngine, user_data: dict[str, str]) -> Callable[..., Awaitable[None]]:
    # Seeds rows behind the repository's back.
    async def _insert(**overrides: Any) -> None:
        row = {**user_data, **overrides}
        async with engine.begin() as conn:
            await conn.execute(users.insert().values(**row))

    return _insert


@pytest.fixture
def fetch_rows(engine: AsyncEngine) -> Callable[[str], Awaitable[list[dict[str, Any]]]]:
    # Raw rows (no type processing), the same shape the repository sees.
    async def _fetch(table: str) -> list[dict[str, Any]]:
        async with engine.connect() as conn:
            result = await conn.execute(sa.text(f"SELECT * FROM {table} ORDER BY id"))
            return [dict(row) for row in result.mappings().all()]

    return _fetch


# --- Module Notes -----------------------------------------------------------
# Each test gets its own database file under tmp_path, so no cleanup between tests.
