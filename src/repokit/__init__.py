"""
repokit

Generic async table repositories over SQLAlchemy Core.

Responsibilities:
- Expose the public API and package version metadata.
"""

from repokit.auditable import AuditableRepository, AuditPolicy
from repokit.case import to_camel, to_snake
from repokit.interfaces import RepositoryProtocol
from repokit.query import Equals, In, Ordering, PaginationParams
from repokit.repository import Repository

__all__ = [
    "AuditPolicy",
    "AuditableRepository",
    "Equals",
    "In",
    "Ordering",
    "PaginationParams",
    "Repository",
    "RepositoryProtocol",
    "__version__",
    "to_camel",
    "to_snake",
]

__version__ = "0.1.0"
