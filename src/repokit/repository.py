"""
repokit.repository

Generic per-table repository over SQLAlchemy Core (async).

Responsibilities:
- CRUD, existence checks and paginated listing for a single table.
- camelCase (application) <-> snake_case (storage) key mapping at the boundary.
- Delegate dialect differences to strategies chosen once at construction.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

import sqlalchemy as sa
from sqlalchemy import RowMapping, Select
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from repokit.case import snake_case, to_camel, to_snake
from repokit.observability.logging import repository_logger
from repokit.query import (
    Criteria,
    PaginationParams,
    resolve_criteria,
    scoped_select,
    table_for,
    where_clauses,
)
from repokit.strategies import InsertStrategy, bind_values, insert_strategy_for, row_bound_for

if TYPE_CHECKING:
    from repokit.auditable import AuditPolicy

T = TypeVar("T")

Connectable = AsyncEngine | AsyncConnection


class Repository(Generic[T]):
    """
    Data access for one table.

    `connection` may be an `AsyncEngine` (each call runs in its own short
    transaction) or an `AsyncConnection` (calls join the caller's transaction,
    which the caller commits).

    `dialect` is the explicit backend name used to choose the insert and
    single-row strategies; it defaults to the connection's `dialect.name`.
    """

    def __init__(
        self,
        connection: Connectable,
        table_name: str,
        *,
        key_column: str = "id",
        dialect: str | None = None,
        insert_strategy: InsertStrategy | None = None,
        audit: AuditPolicy | None = None,
    ) -> None:
        self._connection = connection
        self.table_name = table_name
        self.key_column = snake_case(key_column)
        self.dialect = dialect or connection.dialect.name
        self._inserter = insert_strategy or insert_strategy_for(
            self.dialect, key_column=self.key_column
        )
        self._row_bound = row_bound_for(self.dialect, key_column=self.key_column)
        self._audit = audit
        self._log = repository_logger(table_name)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[AsyncConnection]:
        if isinstance(self._connection, AsyncEngine):
            async with self._connection.begin() as conn:
                yield conn
        else:
            yield self._connection

    # -- queries --------------------------------------------------------------

    def query(self) -> Select[Any]:
        """Unfiltered `SELECT *` over the table."""
        return scoped_select(self.table_name, {})

    def where(
        self,
        criteria: Mapping[str, Any] | None,
        *,
        fields: Sequence[str] | str | None = None,
    ) -> Select[Any]:
        """
        Table-scoped SELECT filtered by `criteria`.

        Scalar values filter by equality (`None` by IS NULL); lists, tuples and
        sets filter by membership. `None` or `{}` selects every row.
        """

        return scoped_select(self.table_name, resolve_criteria(criteria), fields)

    # -- reads ------------------------------------------------------------------

    async def find_by(
        self, criteria: Mapping[str, Any] | None, fields: Sequence[str] | None = None
    ) -> T | None:
        stmt = self.where(criteria, fields=fields).limit(1)
        async with self._connect() as conn:
            row = (await conn.execute(stmt)).mappings().first()
        self._log.debug("repository.find_by", found=row is not None)
        if row is None:
            return None
        return cast(T, self._record(row))

    async def exists(self, criteria: Mapping[str, Any] | None) -> bool:
        stmt = sa.select(self.where(criteria).exists())
        async with self._connect() as conn:
            found = await conn.scalar(stmt)
        self._log.debug("repository.exists", found=bool(found))
        return bool(found)

    async def list(
        self,
        params: PaginationParams | Mapping[str, Any] | None = None,
        /,
        **options: Any,
    ) -> list[T]:
        """
        One page of records.

        `params` (or keyword options) override the defaults one option at a
        time: page 1, 25 per page, no filter, no ordering, all columns.
        Orderings apply in sequence, the first being the primary sort key.
        """

        opts = _pagination(params, options)
        stmt = (
            self.where(opts.criteria, fields=opts.fields)
            .offset(opts.offset)
            .limit(opts.page_size)
            .order_by(*(ordering.clause() for ordering in opts.order_by))
        )
        async with self._connect() as conn:
            rows = (await conn.execute(stmt)).mappings().all()
        self._log.debug("repository.list", page=opts.page, rows=len(rows))
        return [cast(T, self._record(row)) for row in rows]

    # -- writes -----------------------------------------------------------------

    async def create_all(
        self,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        fields: Sequence[str] | None = None,
    ) -> list[T]:
        """
        Insert one or many records and return them as stored (defaults and
        generated keys included), projected to `fields`.

        Constraint violations propagate from the driver.
        """

        rows = to_snake([data] if isinstance(data, Mapping) else list(data))
        if not rows:
            return []

        async with self._connect() as conn:
            stored = await self._inserter.insert(conn, self.table_name, rows, fields)

        self._log.debug("repository.create_all", rows=len(stored))
        return [cast(T, self._record(row)) for row in stored]

    async def create(self, data: Mapping[str, Any], fields: Sequence[str] | None = None) -> T:
        records = await self.create_all([data], fields)
        return records[0]

    async def update(self, criteria: Mapping[str, Any] | None, data: Mapping[str, Any]) -> bool:
        """Change at most one matching row; True iff a row was changed."""

        stmt = self._row_bound.apply(
            self._update_statement(data), self.table_name, resolve_criteria(criteria)
        )
        changed = await self._rowcount(stmt)
        self._log.debug("repository.update", rows=changed)
        return changed == 1

    async def update_all(self, criteria: Mapping[str, Any] | None, data: Mapping[str, Any]) -> int:
        stmt = _filtered(self._update_statement(data), resolve_criteria(criteria))
        changed = await self._rowcount(stmt)
        self._log.debug("repository.update_all", rows=changed)
        return changed

    async def destroy(self, criteria: Mapping[str, Any] | None) -> bool:
        """Delete at most one matching row; True iff a row was deleted."""

        stmt = self._row_bound.apply(
            sa.delete(table_for(self.table_name)), self.table_name, resolve_criteria(criteria)
        )
        deleted = await self._rowcount(stmt)
        self._log.debug("repository.destroy", rows=deleted)
        return deleted == 1

    async def destroy_all(self, criteria: Mapping[str, Any] | None) -> int:
        stmt = _filtered(sa.delete(table_for(self.table_name)), resolve_criteria(criteria))
        deleted = await self._rowcount(stmt)
        self._log.debug("repository.destroy_all", rows=deleted)
        return deleted

    # -- helpers ----------------------------------------------------------------

    def _update_statement(self, data: Mapping[str, Any]) -> sa.Update:
        if self._audit is not None:
            data = self._audit.stamp(data)
        changes = to_snake(data)
        if not changes:
            raise ValueError(f"update of {self.table_name!r} has no fields to change")
        return sa.update(table_for(self.table_name, *changes)).values(bind_values(changes))

    async def _rowcount(self, stmt: sa.Update | sa.Delete) -> int:
        async with self._connect() as conn:
            result = await conn.execute(stmt)
            return result.rowcount

    @staticmethod
    def _record(row: RowMapping) -> dict[str, Any]:
        return to_camel(dict(row))


def _filtered(stmt: sa.Update | sa.Delete, criteria: Criteria) -> Any:
    clauses = where_clauses(criteria)
    return stmt.where(*clauses) if clauses else stmt


def _pagination(
    params: PaginationParams | Mapping[str, Any] | None, options: Mapping[str, Any]
) -> PaginationParams:
    if isinstance(params, PaginationParams) and not options:
        return params
    # Iterating a model yields (field, value) pairs without serializing the values.
    base = dict(params) if isinstance(params, PaginationParams) else dict(params or {})
    # One spelling per option, so `pageSize` overrides a stored `page_size`.
    return PaginationParams.model_validate({**to_snake(base), **to_snake(dict(options))})


# --- Module Notes -----------------------------------------------------------
# Single-row update/destroy are bounded by the strategy inside the SQL statement;
# extra matches are never touched rather than discarded afterwards.
