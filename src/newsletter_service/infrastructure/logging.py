"""Shared logging configuration helpers with per-request correlation ids."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] request_id=%(request_id)s %(message)s"
_NO_REQUEST_ID = "-"

request_id_var: ContextVar[str] = ContextVar("request_id", default=_NO_REQUEST_ID)


class RequestIdLogFilter(logging.Filter):
    """Attach the current request id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


@contextmanager
def bind_request_id(request_id: str) -> Iterator[None]:
    """Bind request_id to the current context until the block exits."""

    token = request_id_var.set(request_id)
    try:
        yield
    finally:
        request_id_var.reset(token)


def configure_logging(*, level: str) -> None:
    """Configure process logging with consistent format and runtime level."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved_level = getattr(logging, normalized_level, logging.INFO)

    logging.basicConfig(
        level=resolved_level,
        format=_LOG_FORMAT,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(item, RequestIdLogFilter) for item in handler.filters):
            handler.addFilter(RequestIdLogFilter())
