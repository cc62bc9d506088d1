"""
Transaction manager handling nested transactions through savepoints.
"""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Generator, List, Optional

from ..events.event import Event, Operation
from ..events.hooks import Hook
from ..utils.naming import is_identifier
from .errors import TransactionError

if TYPE_CHECKING:
    from .connection import InstrumentedConnection


class TransactionManager:
    """
    Coordinates begin/commit/rollback for one connection.

    The outermost level is a real transaction and fires the transaction hooks.
    Every nested level is a savepoint and fires the savepoint hooks instead.
    """

    def __init__(self, connection: "InstrumentedConnection") -> None:
        self.connection = connection
        self._stack: List[str | None] = []
        self._savepoint_counter = itertools.count(1)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def savepoints(self) -> List[str]:
        return [name for name in self._stack if name is not None]

    def begin(self, savepoint: Optional[str] = None) -> None:
        if self.depth == 0:
            if savepoint is not None:
                raise TransactionError("Savepoints require an active transaction.")
            self._run(
                Operation.TX_BEGIN,
                ["BEGIN"],
                Hook.PRE_TRANSACTION_BEGIN,
                Hook.POST_TRANSACTION_BEGIN,
                after=lambda: self._stack.append(None),
            )
            return

        name = savepoint or self._next_savepoint_name()
        if not is_identifier(name):
            raise TransactionError(f"Invalid savepoint name {name!r}.")
        if name in self._stack:
            raise TransactionError(f"Savepoint {name!r} is already active.")
        self._run(
            Operation.SAVEPOINT_CREATE,
            [f"SAVEPOINT {name}"],
            Hook.PRE_SAVEPOINT_CREATE,
            Hook.POST_SAVEPOINT_CREATE,
            savepoint=name,
            after=lambda: self._stack.append(name),
        )

    def commit(self) -> None:
        if self.depth == 0:
            raise TransactionError("No active transaction to commit.")

        name = self._stack[-1]
        if name is None:
            self._run(
                Operation.TX_COMMIT,
                ["COMMIT"],
                Hook.PRE_TRANSACTION_COMMIT,
                Hook.POST_TRANSACTION_COMMIT,
                after=self._stack.pop,
            )
        else:
            self._run(
                Operation.SAVEPOINT_COMMIT,
                [f"RELEASE SAVEPOINT {name}"],
                Hook.PRE_SAVEPOINT_COMMIT,
                Hook.POST_SAVEPOINT_COMMIT,
                savepoint=name,
                after=self._stack.pop,
            )

    def rollback(self) -> None:
        if self.depth == 0:
            raise TransactionError("No active transaction to roll back.")

        name = self._stack[-1]
        if name is None:
            self._run(
                Operation.TX_ROLLBACK,
                ["ROLLBACK"],
                Hook.PRE_TRANSACTION_ROLLBACK,
                Hook.POST_TRANSACTION_ROLLBACK,
                after=self._stack.pop,
            )
        else:
            self._run(
                Operation.SAVEPOINT_ROLLBACK,
                [f"ROLLBACK TO SAVEPOINT {name}", f"RELEASE SAVEPOINT {name}"],
                Hook.PRE_SAVEPOINT_ROLLBACK,
                Hook.POST_SAVEPOINT_ROLLBACK,
                savepoint=name,
                after=self._stack.pop,
            )

    @contextmanager
    def transaction(self, savepoint: Optional[str] = None) -> Generator[None, None, None]:
        """
        Run the block in a transaction level, committing on success.

        A level that was opened is rolled back whenever it is still open on
        the way out with an error, including a failure raised by a listener
        before the commit statement ran.
        """
        outer = self.depth
        try:
            self.begin(savepoint)
        except Exception:
            self._rollback_to(outer)
            raise
        try:
            yield
            self.commit()
        except Exception:
            self._rollback_to(outer)
            raise

    def reset(self) -> None:
        """Forget open levels; used once the underlying connection is gone."""
        self._stack.clear()

    def _rollback_to(self, depth: int) -> None:
        if self.depth > depth:
            self.rollback()

    def _run(
        self,
        operation: Operation,
        statements: List[str],
        pre: Hook,
        post: Hook,
        *,
        after: Callable[[], object],
        savepoint: Optional[str] = None,
    ) -> None:
        # The level stack follows the driver, so it changes before post hooks run.
        driver = self.connection.ensure_connected()
        event = Event(operation, invoker=self.connection, query=statements[0], savepoint=savepoint)

        def run() -> None:
            for sql in statements:
                driver.execute(sql)
            after()

        self.connection.instrument(event, pre, post, run, error_cls=TransactionError)

    def _next_savepoint_name(self) -> str:
        return f"sp_{next(self._savepoint_counter)}"
