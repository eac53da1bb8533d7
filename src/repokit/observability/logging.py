"""
repokit.observability.logging

structlog wiring for repository events.

Responsibilities:
- Configure `structlog` over stdlib logging, from explicit arguments or `Settings`.
- Hand each repository a logger bound to its table name.
- Keep row contents out of emitted events.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.typing import EventDict, Processor

if TYPE_CHECKING:
    from repokit.settings import Settings

REPOSITORY_LOGGER = "repokit.repository"

# Event keys that would carry row contents.
ROW_VALUE_KEYS = frozenset({"criteria", "data", "changes", "record", "records"})


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    """
    One event per line on stderr: JSON by default, key=value console output
    when `json_logs` is false. Call once, from the application embedding repokit.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer: list[Processor]
    if json_logs:
        renderer = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[*shared_processors(service_name), *renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: Settings) -> None:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )


def shared_processors(service_name: str) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_name(service_name),
        drop_row_values,
    ]


def add_service_name(service_name: str) -> Processor:
    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def drop_row_values(_: Any, __: str, event_dict: EventDict) -> EventDict:
    for key in ROW_VALUE_KEYS.intersection(event_dict):
        del event_dict[key]
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def repository_logger(table_name: str) -> structlog.stdlib.BoundLogger:
    return get_logger(REPOSITORY_LOGGER).bind(table=table_name)


# --- Module Notes -----------------------------------------------------------
# Repository events carry the table name, the operation and result counts.
# Nothing configures logging on import; without `configure_logging` the events
# go through structlog's defaults.
