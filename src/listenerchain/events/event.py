"""
Event objects passed to connection, transaction and statement hooks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


class Operation(str, Enum):
    QUERY = "query"
    EXEC = "exec"
    PREPARE = "prepare"
    CONNECT = "connect"
    CLOSE = "close"
    ERROR = "error"
    STMT_EXECUTE = "execute"
    STMT_FETCH = "fetch"
    STMT_FETCH_ALL = "fetch all"
    TX_BEGIN = "begin"
    TX_COMMIT = "commit"
    TX_ROLLBACK = "rollback"
    SAVEPOINT_CREATE = "create savepoint"
    SAVEPOINT_COMMIT = "commit savepoint"
    SAVEPOINT_ROLLBACK = "rollback savepoint"


@dataclass(eq=False)
class Event:
    """
    Context for a single database operation.

    The invoker is whatever object performed the operation (a connection or a
    statement). Timestamps come from :func:`time.monotonic` and are recorded by
    the invoker around the operation itself, so listeners reading
    :attr:`elapsed_ms` in a ``post_*`` hook see the operation's duration.
    """

    operation: Operation
    invoker: Any = None
    query: Optional[str] = None
    params: Tuple[Any, ...] = ()
    savepoint: Optional[str] = None
    exception: Optional[BaseException] = None
    started_at: Optional[float] = field(default=None, repr=False)
    ended_at: Optional[float] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.params is None:
            self.params = ()
        elif not isinstance(self.params, tuple):
            self.params = tuple(self.params)

    @property
    def name(self) -> str:
        return self.operation.value

    def start(self) -> None:
        self.started_at = time.monotonic()
        self.ended_at = None

    def end(self) -> None:
        self.ended_at = time.monotonic()

    @property
    def has_ended(self) -> bool:
        return self.ended_at is not None

    @property
    def elapsed_ms(self) -> Optional[float]:
        if self.started_at is None or self.ended_at is None:
            return None
        return (self.ended_at - self.started_at) * 1000
