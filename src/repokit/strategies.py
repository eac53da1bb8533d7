"""
repokit.strategies

Dialect-dependent statement strategies.

Responsibilities:
- Insert rows and hand back the stored rows, either through RETURNING or by
  fetching the generated keys afterwards.
- Bound UPDATE/DELETE statements to a single row inside the statement itself.
- Pick the right strategy for a dialect name once, at repository construction.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from sqlalchemy import Delete, RowMapping, Update, column, insert, literal, literal_column
from sqlalchemy.ext.asyncio import AsyncConnection

from repokit.errors import InsertError
from repokit.query import Criteria, In, projection, scoped_select, table_for, where_clauses

MutationT = TypeVar("MutationT", Update, Delete)

# Dialects that cannot return inserted rows; their drivers report `lastrowid`.
_FETCH_BY_ID_DIALECTS = frozenset({"sqlite", "mysql", "mariadb"})
# Dialects that reject LIMIT inside an IN subquery but accept UPDATE/DELETE ... LIMIT.
_NATIVE_LIMIT_DIALECTS = frozenset({"mysql", "mariadb"})


def bind_values(row: Mapping[str, Any]) -> dict[str, Any]:
    # `table()` columns are untyped; literal() infers the bind type from the value
    # so dates, decimals and the like get their dialect processing.
    return {name: literal(value) for name, value in row.items()}


class InsertStrategy(Protocol):
    async def insert(
        self,
        conn: AsyncConnection,
        table_name: str,
        rows: Sequence[Mapping[str, Any]],
        fields: Sequence[str] | str | None,
    ) -> list[RowMapping]: ...


class RowBound(Protocol):
    def apply(self, stmt: MutationT, table_name: str, criteria: Criteria) -> MutationT: ...


@dataclass(frozen=True, slots=True)
class InsertThenFetchById:
    key_column: str = "id"

    async def insert(
        self,
        conn: AsyncConnection,
        table_name: str,
        rows: Sequence[Mapping[str, Any]],
        fields: Sequence[str] | str | None,
    ) -> list[RowMapping]:
        # One statement per row: drivers only report the key of the last row inserted.
        ids: list[Any] = []
        for row in rows:
            stmt = insert(table_for(table_name, *row)).values(bind_values(row))
            result = await conn.execute(stmt)
            if result.lastrowid is None:
                raise InsertError(f"no generated key reported for insert into {table_name!r}")
            ids.append(result.lastrowid)

        stmt = scoped_select(table_name, {self.key_column: In(tuple(ids))}, fields).order_by(
            column(self.key_column)
        )
        return list((await conn.execute(stmt)).mappings().all())


@dataclass(frozen=True, slots=True)
class InsertReturning:
    async def insert(
        self,
        conn: AsyncConnection,
        table_name: str,
        rows: Sequence[Mapping[str, Any]],
        fields: Sequence[str] | str | None,
    ) -> list[RowMapping]:
        names = list(dict.fromkeys(name for row in rows for name in row))
        # Rows missing a column fall back to the column default, as a single-row insert would.
        values = [
            {name: literal(row[name]) if name in row else literal_column("DEFAULT") for name in names}
            for row in rows
        ]
        stmt = insert(table_for(table_name, *names)).values(values).returning(*projection(fields))
        return list((await conn.execute(stmt)).mappings().all())


@dataclass(frozen=True, slots=True)
class SubqueryRowBound:
    key_column: str = "id"

    def apply(self, stmt: MutationT, table_name: str, criteria: Criteria) -> MutationT:
        first = scoped_select(table_name, criteria, [self.key_column]).limit(1)
        return stmt.where(column(self.key_column).in_(first))


@dataclass(frozen=True, slots=True)
class DialectLimitRowBound:
    dialect: str = "mysql"

    def apply(self, stmt: MutationT, table_name: str, criteria: Criteria) -> MutationT:
        clauses = where_clauses(criteria)
        if clauses:
            stmt = stmt.where(*clauses)
        return stmt.with_dialect_options(**{f"{self.dialect}_limit": 1})


def insert_strategy_for(dialect: str, *, key_column: str = "id") -> InsertStrategy:
    if dialect in _FETCH_BY_ID_DIALECTS:
        return InsertThenFetchById(key_column=key_column)
    return InsertReturning()


def row_bound_for(dialect: str, *, key_column: str = "id") -> RowBound:
    if dialect in _NATIVE_LIMIT_DIALECTS:
        return DialectLimitRowBound(dialect=dialect)
    return SubqueryRowBound(key_column=key_column)


# --- Module Notes -----------------------------------------------------------
# SQLite does report RETURNING support on recent versions; fetch-by-id stays the
# default there because it works on every SQLite build. Pass `insert_strategy=`
# to a repository to choose explicitly.
