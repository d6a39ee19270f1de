"""Structured logging with correlation IDs.

Provides logging for key operations with:
- JSON structured output for log aggregation
- A correlation ID per dispatcher operation, stamped on every record
- Sensitive data masking (seeds, private keys, signatures)
- Performance timing

Usage:
    from kmsrouter.core.logging import get_logger, log_context

    logger = get_logger(__name__)

    with log_context(correlation_id="abc-123"):
        logger.info("Signing payload", key_type="Ed25519")
"""

import inspect
import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Iterator

from kmsrouter.config import get_settings

# Correlation ID of the operation in progress
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Sensitive fields to mask in logs
SENSITIVE_FIELDS = {
    "password", "secret", "token", "seed", "credential", "authorization",
    "private_key", "secret_key", "signature",
}


def mask_sensitive(data: dict[str, Any]) -> dict[str, Any]:
    """Mask sensitive values in a dictionary."""
    masked = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(s in key_lower for s in SENSITIVE_FIELDS):
            if isinstance(value, str) and len(value) > 8:
                masked[key] = f"{value[:4]}...{value[-4:]}"
            else:
                masked[key] = "[REDACTED]"
        elif isinstance(value, dict):
            masked[key] = mask_sensitive(value)
        else:
            masked[key] = value
    return masked


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return mask_sensitive(getattr(record, "extra_fields", None) or {})


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if correlation_id := getattr(record, "correlation_id", None):
            log_entry["correlation_id"] = correlation_id

        log_entry.update(_record_fields(record))

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Source location for warnings and errors
        if record.levelno >= logging.WARNING:
            log_entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_entry, default=str)


class HumanFormatter(logging.Formatter):
    """One line per record for development consoles, fields appended."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        parts = []
        if correlation_id := getattr(record, "correlation_id", None):
            parts.append(f"cid={correlation_id[:8]}")
        parts.extend(f"{k}={v}" for k, v in _record_fields(record).items())

        line = super().format(record)
        if not parts:
            return line

        # Keep fields on the message line, ahead of any traceback
        head, sep, tail = line.partition("\n")
        return f"{head} | {' '.join(parts)}{sep}{tail}"


class StructuredLogger(logging.Logger):
    """Logger accepting structured fields as keyword arguments.

    ``logger.info("Key created", key_type="Ed25519")`` stores the keywords in
    ``record.extra_fields`` and the current correlation ID in
    ``record.correlation_id``.
    """

    def _log(
        self,
        level: int,
        msg: str,
        args: tuple,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields,
    ):
        extra = dict(extra or {})
        if fields:
            extra["extra_fields"] = fields
        if correlation_id := correlation_id_var.get():
            extra["correlation_id"] = correlation_id
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module."""
    logging.setLoggerClass(StructuredLogger)
    logger = logging.getLogger(name)
    logging.setLoggerClass(logging.Logger)
    return logger


def setup_logging(json_output: bool | None = None, level: str | None = None):
    """Configure root logging for a host application.

    The package never configures logging on import; hosts call this once.

    Args:
        json_output: Use JSON format (for production). Defaults to KMS_LOG_JSON.
        level: Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to KMS_LOG_LEVEL.
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.log_json
    if level is None:
        level = settings.log_level

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())
    root_logger.addHandler(handler)


@contextmanager
def log_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation ID to every log record emitted inside the block.

    A new ID is generated when none is given.
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


def log_operation(operation: str):
    """Decorator to log function execution with timing.

    The call runs inside ``log_context``: it joins the caller's correlation
    ID or starts a new one, so provider logs share the operation's ID.
    """
    def decorator(func: Callable):
        logger = get_logger(func.__module__)

        def finished(start: float):
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.debug(f"{operation} completed", operation=operation, duration_ms=duration_ms)

        def failed(start: float, e: Exception):
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.warning(
                f"{operation} failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            with log_context(correlation_id_var.get()):
                start = time.monotonic()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    failed(start, e)
                    raise
                finished(start)
                return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with log_context(correlation_id_var.get()):
                start = time.monotonic()
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    failed(start, e)
                    raise
                finished(start)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
