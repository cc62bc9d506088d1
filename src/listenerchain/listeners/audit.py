"""
Listener writing every lifecycle hook to the listenerchain log.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..events.event import Event
from ..utils import get_logger, redact_params
from .base import DynamicListener

_ERROR_HOOKS = {"pre_error", "post_error"}


class LoggingListener(DynamicListener):
    """
    Logs hooks as they are dispatched.

    Statement events include the SQL, redacted parameters and, once the
    operation has finished, its duration. Error hooks are logged as warnings.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, level: int = logging.DEBUG) -> None:
        super().__init__()
        self.logger = logger or get_logger("listeners.audit")
        self.level = level

    def handle(self, hook: str, payload: Any) -> None:
        if isinstance(payload, Event):
            self._log_event(hook, payload)
        else:
            self.logger.log(
                self.level,
                "%s %s",
                hook,
                type(payload).__name__,
                extra={"hook": hook},
            )

    def _log_event(self, hook: str, event: Event) -> None:
        extra = {
            "hook": hook,
            "sql": event.query,
            "params": redact_params(event.params),
            "elapsed_ms": event.elapsed_ms,
        }
        if hook in _ERROR_HOOKS:
            self.logger.warning(
                "%s %s failed: %s",
                hook,
                event.query or event.name,
                event.exception,
                extra=extra,
            )
            return
        if event.elapsed_ms is not None:
            self.logger.log(
                self.level,
                "%s %s (%.2fms)",
                hook,
                event.query or event.name,
                event.elapsed_ms,
                extra=extra,
            )
        else:
            self.logger.log(self.level, "%s %s", hook, event.query or event.name, extra=extra)
