"""Structured logging for the resolution engine.

Every module logs through ``get_context_logger(__name__)`` and attaches
its fields via ``extra``; matching decisions and geocoding escalations
go through the ``log_*_event`` helpers so they share one ``event``
vocabulary. The engine is a library: nothing is configured at import.
``setup_logging`` attaches a handler to the ``vettdre`` logger tree only
and leaves the root logger to the host application.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import get_settings

PACKAGE_LOGGER = "vettdre"
RESOLUTION_LOGGER = "vettdre.resolution"
GEOCODING_LOGGER = "vettdre.geocoding"

# Attributes present on every LogRecord; anything else came in via ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}

# Fields the text formatter appends after the message when present.
_TEXT_FIELDS = ("event", "operation", "outcome", "confidence", "is_match")


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON document per record, ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data["function"] = record.funcName
        log_data["line"] = record.lineno

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Resolution and geocoding events get their key fields appended, e.g.
    ``... | Geocode resolved: 10 Main St [event=geocode_escalation confidence=95]``.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extra_fields(record)
        fields = [
            f"{key}={extras[key]}"
            for key in _TEXT_FIELDS
            if extras.get(key) is not None
        ]
        if fields:
            line = f"{line} [{' '.join(fields)}]"
        return line


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> logging.Logger:
    """Attach a stdout handler to the ``vettdre`` logger tree.

    Args:
        level: Log level name (default from settings)
        log_format: "json" or "text" (default from settings)

    Returns:
        The configured package logger
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level, logging.INFO))
    package_logger.handlers = [handler]
    package_logger.propagate = False

    # Request lines from the geocoding client are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    package_logger.debug(
        "Logging initialized",
        extra={
            "environment": settings.environment,
            "log_level": level,
            "log_format": log_format,
        },
    )
    return package_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Adds fixed context fields to every record.

    Fields passed at the call site via ``extra`` take precedence over the
    adapter's context.
    """

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_context_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """Get a logger that stamps ``context`` onto every record.

    Usage:
        logger = get_context_logger(__name__, component="owner_resolver")
        logger.debug("Clustered names", extra={"cluster_count": 2})
    """
    return ContextLoggerAdapter(get_logger(name), context)


# =========================
# Event helpers
# =========================


def log_resolution_event(
    operation: str,
    subject: str,
    result: str | None,
    confidence: int,
    is_match: bool,
) -> None:
    """Log the outcome of a resolution operation at DEBUG.

    Args:
        operation: resolve_owner or group_by_owner
        subject: Name or label being resolved
        result: Resolved display name or group label, if any
        confidence: Resolution confidence (0-100)
        is_match: Whether more than one record was tied together
    """
    get_logger(RESOLUTION_LOGGER).debug(
        f"Resolution {operation}: {subject} -> {result or 'unresolved'}",
        extra={
            "operation": operation,
            "subject": subject,
            "resolved": result,
            "confidence": confidence,
            "is_match": is_match,
            "event": "entity_resolution",
        },
    )


def log_geocode_event(
    address: str,
    outcome: str,
    confidence: int | None = None,
) -> None:
    """Log a geocoding escalation; failures are WARNING, success DEBUG.

    Args:
        address: Raw address that was escalated
        outcome: budget_exhausted, no_api_key, http_error, no_result,
            resolved or error
        confidence: Tier confidence when resolved
    """
    level = logging.DEBUG if outcome == "resolved" else logging.WARNING
    get_logger(GEOCODING_LOGGER).log(
        level,
        f"Geocode {outcome}: {address}",
        extra={
            "address": address,
            "outcome": outcome,
            "confidence": confidence,
            "event": "geocode_escalation",
        },
    )
