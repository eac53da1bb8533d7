"""
repokit.case

camelCase <-> snake_case key transforms.

Responsibilities:
- Convert single names between application (camelCase) and storage (snake_case)
  conventions.
- Apply those conversions over names, lists of names and flat records.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

# Marker for "all columns"; never renamed.
WILDCARD = "*"

# Anything that is not a letter or digit separates words.
_SEPARATORS = re.compile(r"[\W_]+")


def _split(chunk: str) -> list[str]:
    # A capital starts a word unless it continues an acronym run ("HTTPStatus"
    # splits before "S"). Digits stay attached to the preceding word.
    words, start = [], 0
    for i in range(1, len(chunk)):
        prev, char, following = chunk[i - 1], chunk[i], chunk[i + 1 : i + 2]
        if char.isdigit():
            continue
        if (
            prev.isdigit()
            or (char.isupper() and not prev.isupper())
            or (char.isupper() and following.islower())
        ):
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return words


def _words(name: str) -> list[str]:
    return [word for chunk in _SEPARATORS.split(name) if chunk for word in _split(chunk)]


def _is_camel(name: str) -> bool:
    return name[:1].islower() and name.isalnum()


def camel_case(name: str) -> str:
    """
    >>> camel_case("created_at")
    'createdAt'
    >>> camel_case("HTTPStatus")
    'httpStatus'
    >>> camel_case("prénom_usage")
    'prénomUsage'
    """

    # Names already in camelCase are returned as-is.
    if _is_camel(name):
        return name
    words = _words(name)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


def snake_case(name: str) -> str:
    """
    >>> snake_case("createdAt")
    'created_at'
    >>> snake_case("HTTPStatus")
    'http_status'
    >>> snake_case("naïveField")
    'naïve_field'
    """

    return "_".join(w.lower() for w in _words(name))


def _transform(data: Any, fn: Callable[[str], str]) -> Any:
    if not data or data == WILDCARD:
        return data
    if isinstance(data, (list, tuple)):
        return [_transform(d, fn) for d in data]
    if isinstance(data, Mapping):
        # Flat: only keys are renamed, values are passed through as-is.
        return {(fn(k) if isinstance(k, str) else k): v for k, v in data.items()}
    if isinstance(data, str):
        return fn(data)
    return data


def to_camel(data: Any) -> Any:
    """Rename a name, a list of names, or the keys of a record to camelCase."""
    return _transform(data, camel_case)


def to_snake(data: Any) -> Any:
    """Rename a name, a list of names, or the keys of a record to snake_case."""
    return _transform(data, snake_case)


# --- Module Notes -----------------------------------------------------------
# Names whose word boundaries cannot be recovered do not round-trip
# (e.g. "userID" -> "user_id" -> "userId"). Each direction is idempotent.
