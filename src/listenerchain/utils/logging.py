"""
Logging helpers shared by connections and listeners.

Every logger lives under the ``listenerchain`` namespace. The first call to
:func:`get_logger` installs a single stream handler on that namespace which
stamps records with the current correlation id, so log lines emitted by the
listeners of one unit of work can be grouped together.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO, Any, Iterator, Optional, Sequence

from .redaction import redact_params

ROOT_LOGGER = "listenerchain"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(correlation_id)s | %(name)s | %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def configure_logging(level: int = logging.INFO, *, stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Install the package handler once and return the root package logger.

    Later calls leave an existing handler alone, so applications that
    configured ``listenerchain`` themselves keep their setup.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_correlation_id(value: Optional[str] = None) -> str:
    token = value or uuid.uuid4().hex
    _correlation_id.set(token)
    return token


def get_correlation_id() -> str:
    cid = _correlation_id.get()
    if cid is None:
        cid = set_correlation_id()
    return cid


@contextmanager
def correlation_scope(value: Optional[str] = None) -> Iterator[str]:
    """
    Use ``value`` (or a fresh id) as correlation id inside the block only.
    """
    token = _correlation_id.set(value or uuid.uuid4().hex)
    try:
        yield get_correlation_id()
    finally:
        _correlation_id.reset(token)


class OperationTimer:
    """
    Times one driver operation and logs it on exit.

    Runs at or above ``threshold_ms`` are logged as warnings. Parameters are
    redacted before they reach the log record.
    """

    def __init__(
        self,
        name: str,
        logger: logging.Logger,
        *,
        sql: str | None = None,
        params: Sequence[Any] | None = None,
        threshold_ms: float = 100,
    ) -> None:
        self.name = name
        self.logger = logger
        self.sql = sql
        self.params = params
        self.threshold_ms = threshold_ms
        self.elapsed_ms: float | None = None
        self._started: float | None = None

    def __enter__(self) -> "OperationTimer":
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed_ms = (time.monotonic() - self._started) * 1000
        slow = self.elapsed_ms >= self.threshold_ms
        extra = {
            "sql": self.sql,
            "params": redact_params(self.params),
            "elapsed_ms": self.elapsed_ms,
            "failed": exc_type is not None,
        }
        self.logger.log(
            logging.WARNING if slow else logging.DEBUG,
            "%s took %.2fms%s",
            self.name,
            self.elapsed_ms,
            " (failed)" if exc_type is not None else "",
            extra=extra,
        )


def time_call(
    name: str,
    logger: logging.Logger,
    *,
    sql: str | None = None,
    params: Sequence[Any] | None = None,
    threshold_ms: float = 100,
) -> OperationTimer:
    return OperationTimer(name, logger, sql=sql, params=params, threshold_ms=threshold_ms)
