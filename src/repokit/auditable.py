"""
repokit.auditable

Last-modified stamping for repository updates.

Responsibilities:
- Define `AuditPolicy`, which adds a timestamp column to a change-set.
- Provide `AuditableRepository`, a Repository constructed with such a policy.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from repokit.repository import Connectable, Repository, T

DEFAULT_AUDIT_COLUMN = "updatedAt"


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class AuditPolicy:
    # Logical (camelCase) column name; snake-cased with the rest of the change-set.
    column: str = DEFAULT_AUDIT_COLUMN
    clock: Callable[[], datetime] = utcnow

    def stamp(self, data: Mapping[str, Any] | None) -> dict[str, Any]:
        """
        Copy of `data` with the audit column set to "now".

        The stamp overrides any caller-supplied value for the same column.
        """

        return {**(data or {}), self.column: self.clock()}


class AuditableRepository(Repository[T]):
    """
    Repository whose `update` and `update_all` also set `audit_column`.

    Every row touched by one `update_all` call receives the same instant.
    """

    def __init__(
        self,
        connection: Connectable,
        table_name: str,
        audit_column: str = DEFAULT_AUDIT_COLUMN,
        *,
        clock: Callable[[], datetime] = utcnow,
        **options: Any,
    ) -> None:
        super().__init__(
            connection, table_name, audit=AuditPolicy(column=audit_column, clock=clock), **options
        )

    @property
    def audit_column(self) -> str:
        return self._audit.column


# --- Module Notes -----------------------------------------------------------
# Timestamps are timezone-aware UTC; backends without tz support store them as naive UTC.
