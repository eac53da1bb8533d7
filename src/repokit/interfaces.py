"""
repokit.interfaces

Structural contract of a repository.

Responsibilities:
- Let application code depend on the repository operations rather than on
  `Repository` itself (fakes in tests, alternative backends).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

from repokit.query import PaginationParams

T = TypeVar("T")


@runtime_checkable
class RepositoryProtocol(Protocol[T]):
    async def create_all(
        self,
        data: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        fields: Sequence[str] | None = None,
    ) -> list[T]: ...

    async def create(self, data: Mapping[str, Any], fields: Sequence[str] | None = None) -> T: ...

    async def find_by(
        self, criteria: Mapping[str, Any] | None, fields: Sequence[str] | None = None
    ) -> T | None: ...

    async def exists(self, criteria: Mapping[str, Any] | None) -> bool: ...

    async def list(
        self, params: PaginationParams | Mapping[str, Any] | None = None, /, **options: Any
    ) -> list[T]: ...

    async def update(self, criteria: Mapping[str, Any] | None, data: Mapping[str, Any]) -> bool: ...

    async def update_all(
        self, criteria: Mapping[str, Any] | None, data: Mapping[str, Any]
    ) -> int: ...

    async def destroy(self, criteria: Mapping[str, Any] | None) -> bool: ...

    async def destroy_all(self, criteria: Mapping[str, Any] | None) -> int: ...
