"""Library logging configuration utilities."""

from __future__ import annotations

import contextvars
import logging
import os

LOGGER_NAMESPACE = "aio-lib-campaign-standard"

_LOG_CONFIGURED = False
_REQUEST_ID_CTX: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "campaign_standard_request_id", default=None
)


class RequestContextFilter(logging.Filter):
    """Inject the active API call's request ID into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _REQUEST_ID_CTX.get()
        return True


def set_request_id(request_id: str | None) -> contextvars.Token[str | None]:
    """Bind the current request ID to the logging context."""
    return _REQUEST_ID_CTX.set(request_id)


def reset_request_id(token: contextvars.Token[str | None]) -> None:
    """Reset the request ID context."""
    _REQUEST_ID_CTX.reset(token)


def get_request_id() -> str | None:
    """Return the request ID associated with the current context, if any."""
    return _REQUEST_ID_CTX.get()


def get_logger(suffix: str | None = None) -> logging.Logger:
    """Return the library logger, or one of its children."""
    if suffix:
        return logging.getLogger(f"{LOGGER_NAMESPACE}.{suffix}")
    return logging.getLogger(LOGGER_NAMESPACE)


def configure_logging() -> None:
    """Configure the library logger from ``LOG_LEVEL``.

    Only the ``aio-lib-campaign-standard`` namespace is touched, and only the
    first call has any effect.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING

    library_logger = logging.getLogger(LOGGER_NAMESPACE)
    library_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(RequestContextFilter())
    console_formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s (request_id=%(request_id)s)"
    )
    console_handler.setFormatter(console_formatter)
    library_logger.addHandler(console_handler)

    _LOG_CONFIGURED = True


__all__ = [
    "LOGGER_NAMESPACE",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "reset_request_id",
    "set_request_id",
]
