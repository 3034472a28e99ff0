"""
Structured JSON logging: timestamp, event_type, address fields.

structlog with ISO timestamps, log level, and consistent keys for aggregation.
All engine modules use get_logger() and pass event_type as the first argument
(plus user_address / subject_id where relevant).

Uses only Python stdlib logging and structlog; no trust_insight imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# LOG_STREAM: stderr (default) or stdout; stdout is reserved for CLI output
LOG_STREAM = os.getenv("LOG_STREAM", "stderr").strip().lower()


def log_stream(name: str = LOG_STREAM) -> Any:
    """Return the stream logs are written to: sys.stdout for "stdout", else sys.stderr."""
    return sys.stdout if name == "stdout" else sys.stderr


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import: JSON, timestamp, level, event_type."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=log_stream().isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=log_stream()),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("trusted_circle_fetched", user_address=addr, contacts=12)
    Output (JSON): {"event_type": "trusted_circle_fetched", "user_address": "...", "contacts": 12,
    "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_user(user_address: str, name: str = "trust_insight") -> structlog.BoundLogger:
    """Return a logger with user_address (truncated) bound to all subsequent log calls."""
    return get_logger(name).bind(user_address=short_id(user_address))


def short_id(value: str | None, keep: int = 16) -> str:
    """Truncate an address or term id for log output."""
    value = value or ""
    return value[:keep] + "..." if len(value) > keep else value
