"""
Statement wrapper firing statement-level hooks.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from ..events.event import Event, Operation
from ..events.hooks import Hook
from .errors import ExecutionError

if TYPE_CHECKING:
    from .connection import InstrumentedConnection


class Statement:
    """
    A prepared SQL statement bound to an :class:`InstrumentedConnection`.

    Parameters are positional sequences matching ``?`` placeholders.
    """

    def __init__(
        self,
        connection: "InstrumentedConnection",
        sql: str,
        *,
        cursor: Optional[sqlite3.Cursor] = None,
    ) -> None:
        self.connection = connection
        self.sql = sql
        self.params: tuple[Any, ...] = ()
        self._cursor = cursor

    def __repr__(self) -> str:
        return f"<Statement {self.sql!r}>"

    @property
    def executed(self) -> bool:
        return self._cursor is not None

    @property
    def rowcount(self) -> int:
        return self._require_cursor().rowcount

    @property
    def lastrowid(self) -> Any:
        return self._require_cursor().lastrowid

    def execute(self, params: Sequence[Any] | None = None) -> "Statement":
        bound = tuple(params or ())
        driver = self.connection.ensure_connected()
        event = Event(Operation.STMT_EXECUTE, invoker=self, query=self.sql, params=bound)

        def run() -> sqlite3.Cursor:
            cursor = driver.cursor()
            cursor.execute(self.sql, bound)
            return cursor

        self._cursor = self.connection.instrument(
            event, Hook.PRE_STMT_EXECUTE, Hook.POST_STMT_EXECUTE, run
        )
        self.params = bound
        return self

    def fetch(self) -> Optional[sqlite3.Row]:
        cursor = self._require_cursor()
        event = Event(Operation.STMT_FETCH, invoker=self, query=self.sql, params=self.params)
        return self.connection.instrument(event, Hook.PRE_FETCH, Hook.POST_FETCH, cursor.fetchone)

    def fetch_all(self) -> List[sqlite3.Row]:
        cursor = self._require_cursor()
        event = Event(Operation.STMT_FETCH_ALL, invoker=self, query=self.sql, params=self.params)
        return self.connection.instrument(
            event, Hook.PRE_FETCH_ALL, Hook.POST_FETCH_ALL, cursor.fetchall
        )

    def _require_cursor(self) -> sqlite3.Cursor:
        if self._cursor is None:
            raise ExecutionError(f"Statement {self.sql!r} has not been executed.")
        return self._cursor
