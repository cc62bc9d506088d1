"""
SQLite connection that reports its lifecycle to a listener.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Generator, Optional, Sequence, Type, TypeVar

from ..events.event import Event, Operation
from ..events.hooks import Hook
from ..listeners import ConfigurationError, ListenerChain, attach_listener, supports_listener_contract
from ..records import RecordCollection
from ..utils import get_logger, redact_params, time_call
from .config import ConnectionConfig
from .errors import ConnectionClosedError, DatabaseError, ExecutionError
from .statement import Statement
from .transaction import TransactionManager

if TYPE_CHECKING:
    from ..records import Record

T = TypeVar("T")
TRecord = TypeVar("TRecord", bound="Record")


class InstrumentedConnection:
    """
    Wraps a stdlib ``sqlite3`` connection and fires lifecycle hooks.

    The listener receives ``on_open`` when the connection object is created,
    then pre/post hook pairs around connecting, closing, transactions,
    savepoints and statements. Driver failures fire ``pre_error`` and
    ``post_error`` before being re-raised as :class:`ExecutionError` (or
    :class:`TransactionError` for transaction control). Exceptions raised by
    listeners themselves are never wrapped.
    """

    slow_query_ms = 100

    def __init__(self, config: ConnectionConfig | str, listener: Any = None) -> None:
        if isinstance(config, str):
            config = ConnectionConfig.from_dsn(config)
        self.config = config
        self.listener: Any = ListenerChain() if listener is None else self._checked(listener)
        self.transactions = TransactionManager(self)
        self.logger = get_logger("connection")
        self._driver: sqlite3.Connection | None = None
        self.notify(Hook.ON_OPEN, self)

    def __repr__(self) -> str:
        state = "open" if self.is_connected else "closed"
        return f"<InstrumentedConnection {self.config.redacted_dsn()} {state}>"

    def __enter__(self) -> "InstrumentedConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Listeners
    # ------------------------------------------------------------------ #
    def add_listener(self, listener: Any, name: Optional[str] = None) -> None:
        self.listener = attach_listener(self.listener, listener, name)

    def set_listener(self, listener: Any) -> None:
        self.listener = self._checked(listener)

    def notify(self, hook: Hook, payload: Any) -> None:
        getattr(self.listener, hook.value)(payload)

    @staticmethod
    def _checked(listener: Any) -> Any:
        if not supports_listener_contract(listener):
            raise ConfigurationError(
                f"Couldn't use {listener!r} as connection listener: listeners must implement "
                "every lifecycle hook (EventListener) or be Overloadable."
            )
        return listener

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    @property
    def is_connected(self) -> bool:
        return self._driver is not None

    @property
    def raw_connection(self) -> sqlite3.Connection:
        if self._driver is None:
            raise ConnectionClosedError("Connection is not open.")
        return self._driver

    def connect(self) -> bool:
        """
        Open the driver connection. Returns False when it was already open.
        """
        if self._driver is not None:
            return False
        pragmas = self.config.pragma_statements()
        event = Event(Operation.CONNECT, invoker=self)
        self.instrument(
            event, Hook.PRE_CONNECT, Hook.POST_CONNECT, lambda: self._open_driver(pragmas)
        )
        self.logger.debug("Connected to %s", self.config.descriptive_label())
        return True

    def ensure_connected(self) -> sqlite3.Connection:
        if self._driver is None:
            self.connect()
        return self.raw_connection

    def close(self) -> None:
        if self._driver is None:
            return
        event = Event(Operation.CLOSE, invoker=self)
        self.instrument(event, Hook.PRE_CLOSE, Hook.POST_CLOSE, self._close_driver)

    def _open_driver(self, pragmas: Sequence[str]) -> None:
        timeout = self.config.timeout if self.config.timeout is not None else 5.0
        driver = sqlite3.connect(
            self.config.database_path(),
            isolation_level=None,
            timeout=timeout,
            check_same_thread=False,
        )
        driver.row_factory = sqlite3.Row
        try:
            driver.execute("PRAGMA foreign_keys = ON")
            for statement in pragmas:
                driver.execute(statement)
        except sqlite3.Error:
            driver.close()
            raise
        self._driver = driver

    def _close_driver(self) -> None:
        driver, self._driver = self._driver, None
        self.transactions.reset()
        if driver is not None:
            driver.close()

    # ------------------------------------------------------------------ #
    # Statements
    # ------------------------------------------------------------------ #
    def query(self, sql: str, params: Sequence[Any] | None = None) -> Statement:
        """
        Run a statement whose rows will be fetched.

        Without parameters the SQL runs directly under the query hooks. With
        parameters it is prepared and executed as a :class:`Statement`.
        """
        if params:
            return self.prepare(sql).execute(params)
        driver = self.ensure_connected()
        event = Event(Operation.QUERY, invoker=self, query=sql)
        cursor = self.instrument(event, Hook.PRE_QUERY, Hook.POST_QUERY, lambda: driver.execute(sql))
        return Statement(self, sql, cursor=cursor)

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """
        Run a data-modifying statement and return the affected row count.
        """
        if params:
            return self.prepare(sql).execute(params).rowcount
        driver = self.ensure_connected()
        event = Event(Operation.EXEC, invoker=self, query=sql)
        cursor = self.instrument(event, Hook.PRE_EXEC, Hook.POST_EXEC, lambda: driver.execute(sql))
        return cursor.rowcount

    def prepare(self, sql: str) -> Statement:
        self.ensure_connected()
        event = Event(Operation.PREPARE, invoker=self, query=sql)
        return self.instrument(event, Hook.PRE_PREPARE, Hook.POST_PREPARE, lambda: Statement(self, sql))

    def fetch_records(
        self,
        record_cls: Type[TRecord],
        sql: str,
        params: Sequence[Any] | None = None,
    ) -> RecordCollection:
        rows = self.query(sql, params).fetch_all()
        return RecordCollection(record_cls, [record_cls.hydrate(row) for row in rows])

    def instrument(
        self,
        event: Event,
        pre: Hook,
        post: Hook,
        operation: Callable[[], T],
        *,
        error_cls: Type[DatabaseError] = ExecutionError,
    ) -> T:
        """
        Run ``operation`` between the ``pre`` and ``post`` hooks.

        The event is timed around the operation only. ``sqlite3`` errors are
        reported through the error hooks and re-raised as ``error_cls``.
        """
        self.notify(pre, event)
        event.start()
        try:
            with time_call(
                f"sqlite.{event.name}",
                self.logger,
                sql=event.query,
                params=event.params,
                threshold_ms=self.slow_query_ms,
            ):
                result = operation()
        except sqlite3.Error as exc:
            event.end()
            self._report_error(event, exc)
            raise error_cls(f"{event.name} failed: {exc}") from exc
        event.end()
        if event.query:
            self.logger.debug(
                "SQL %s",
                event.name,
                extra={"sql": event.query, "params": redact_params(event.params)},
            )
        self.notify(post, event)
        return result

    def _report_error(self, event: Event, exc: sqlite3.Error) -> None:
        event.exception = exc
        error_event = Event(
            Operation.ERROR,
            invoker=event.invoker,
            query=event.query,
            params=event.params,
            savepoint=event.savepoint,
            exception=exc,
        )
        error_event.started_at, error_event.ended_at = event.started_at, event.ended_at
        self.notify(Hook.PRE_ERROR, error_event)
        self.logger.warning(
            "%s failed: %s",
            event.name,
            exc,
            extra={"sql": event.query, "params": redact_params(event.params)},
        )
        self.notify(Hook.POST_ERROR, error_event)

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    @property
    def transaction_depth(self) -> int:
        return self.transactions.depth

    def begin(self, savepoint: Optional[str] = None) -> None:
        self.transactions.begin(savepoint)

    def commit(self) -> None:
        self.transactions.commit()

    def rollback(self) -> None:
        self.transactions.rollback()

    @contextmanager
    def transaction(self, savepoint: Optional[str] = None) -> Generator[None, None, None]:
        with self.transactions.transaction(savepoint):
            yield
