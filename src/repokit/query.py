"""
repokit.query

Criteria, ordering and pagination translated into SQLAlchemy Core constructs.

Responsibilities:
- Resolve loose criteria mappings into tagged conditions (`Equals` / `In`)
  keyed by snake_case column name.
- Build table-scoped SELECT statements with projection and filtering.
- Model ordering terms and pagination parameters (with their defaults).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import ColumnElement, Select, column, literal_column, select, table
from sqlalchemy.sql.expression import TableClause

from repokit.case import WILDCARD, camel_case, snake_case, to_snake

DEFAULT_PAGE_SIZE = 25

# Python types treated as "one of these values" rather than a single value.
_MEMBERSHIP_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True, slots=True)
class Equals:
    value: Any

    def clause(self, name: str) -> ColumnElement[bool]:
        col = column(name)
        if self.value is None:
            return col.is_(None)
        return col == self.value


@dataclass(frozen=True, slots=True)
class In:
    values: tuple[Any, ...]

    def clause(self, name: str) -> ColumnElement[bool]:
        # An empty tuple renders as an always-false expression.
        return column(name).in_(self.values)


Condition = Equals | In
Criteria = dict[str, Condition]


def condition_for(value: Any) -> Condition:
    if isinstance(value, (Equals, In)):
        return value
    if isinstance(value, _MEMBERSHIP_TYPES):
        return In(tuple(value))
    return Equals(value)


def resolve_criteria(criteria: Mapping[str, Any] | None) -> Criteria:
    """
    Turn `{"createdBy": 3, "role": ["admin", "owner"]}` into
    `{"created_by": Equals(3), "role": In(("admin", "owner"))}`.

    `None` and empty mappings resolve to no conditions (match every row).
    """

    if not criteria:
        return {}
    return {snake_case(key): condition_for(value) for key, value in criteria.items()}


def where_clauses(criteria: Criteria) -> list[ColumnElement[bool]]:
    return [cond.clause(name) for name, cond in criteria.items()]


def table_for(table_name: str, *column_names: str) -> TableClause:
    return table(table_name, *(column(name) for name in column_names))


def projection(fields: Sequence[str] | str | None) -> list[ColumnElement[Any]]:
    cols = to_snake(fields or WILDCARD)
    if cols == WILDCARD:
        return [literal_column(WILDCARD)]
    if isinstance(cols, str):
        cols = [cols]
    return [column(name) for name in cols]


def scoped_select(
    table_name: str, criteria: Criteria, fields: Sequence[str] | str | None = None
) -> Select[Any]:
    stmt = select(*projection(fields)).select_from(table_for(table_name))
    clauses = where_clauses(criteria)
    if clauses:
        stmt = stmt.where(*clauses)
    return stmt


class Ordering(BaseModel):
    """One ORDER BY term. `Ordering.parse("-email")` is `email DESC`."""

    model_config = ConfigDict(frozen=True)

    field: str
    direction: Literal["ASC", "DESC"] = "ASC"

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def parse(cls, term: str) -> Ordering:
        if term.startswith("-"):
            return cls(field=term[1:], direction="DESC")
        return cls(field=term)

    def clause(self) -> ColumnElement[Any]:
        col = column(to_snake(self.field))
        return col.desc() if self.direction == "DESC" else col.asc()


class PaginationParams(BaseModel):
    """
    Options for `Repository.list`.

    Every option has its own default, so a caller supplying only `page`
    keeps the default `page_size`, ordering and projection. Keys may be given
    in camelCase (`pageSize`, `orderBy`) or snake_case.
    """

    model_config = ConfigDict(
        alias_generator=camel_case,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    criteria: dict[str, Any] = Field(default_factory=dict)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    order_by: list[Ordering] = Field(default_factory=list)
    fields: list[str] | str | None = None

    @field_validator("criteria", mode="before")
    @classmethod
    def _criteria_or_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("order_by", mode="before")
    @classmethod
    def _coerce_orderings(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, Ordering, Mapping)):
            value = [value]
        return [Ordering.parse(item) if isinstance(item, str) else item for item in value]

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# --- Module Notes -----------------------------------------------------------
# Statements are built from lightweight `table()`/`column()` constructs, so no
# reflected metadata is needed; column names are taken verbatim after snake-casing.
