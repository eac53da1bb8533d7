"""
repokit.errors

Errors raised by repokit itself.

Database errors (IntegrityError and friends) are not wrapped: they propagate
from SQLAlchemy unchanged.
"""

from __future__ import annotations


class RepositoryError(Exception):
    pass


class InsertError(RepositoryError):
    """The driver did not report a generated key for an inserted row."""


# --- Module Notes -----------------------------------------------------------
# Not-found outcomes are values (None / False / 0), never exceptions.
