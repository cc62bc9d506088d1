"""
Listener contracts for lifecycle hooks.

Two kinds of objects can be registered with a :class:`ListenerChain`:

* objects implementing every hook method of :class:`EventListener`, usually by
  subclassing :class:`Listener` and overriding the hooks they care about;
* overloadable objects that resolve method names at call time through
  ``__getattr__``, such as :class:`DynamicListener`.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..events.hooks import Hook

HookHandler = Callable[[str, Any], None]


@runtime_checkable
class EventListener(Protocol):
    """
    Full set of lifecycle hooks. Every hook receives a single payload and
    returns nothing.
    """

    # Record lifecycle ----------------------------------------------------
    def on_load(self, record: Any) -> None:
        """A record has been loaded and populated from the database."""

    def on_pre_load(self, record: Any) -> None:
        """A record is being loaded but is not yet populated."""

    def on_sleep(self, record: Any) -> None:
        """A record is being serialized."""

    def on_wake_up(self, record: Any) -> None:
        """A record has been unserialized."""

    # Connection lifecycle ------------------------------------------------
    def on_open(self, connection: Any) -> None:
        """A connection object has been created."""

    def pre_connect(self, event: Any) -> None:
        ...

    def post_connect(self, event: Any) -> None:
        ...

    def pre_close(self, event: Any) -> None:
        ...

    def post_close(self, event: Any) -> None:
        ...

    # Transactions --------------------------------------------------------
    def pre_transaction_begin(self, event: Any) -> None:
        ...

    def post_transaction_begin(self, event: Any) -> None:
        ...

    def pre_transaction_commit(self, event: Any) -> None:
        ...

    def post_transaction_commit(self, event: Any) -> None:
        ...

    def pre_transaction_rollback(self, event: Any) -> None:
        ...

    def post_transaction_rollback(self, event: Any) -> None:
        ...

    # Savepoints ----------------------------------------------------------
    def pre_savepoint_create(self, event: Any) -> None:
        ...

    def post_savepoint_create(self, event: Any) -> None:
        ...

    def pre_savepoint_commit(self, event: Any) -> None:
        ...

    def post_savepoint_commit(self, event: Any) -> None:
        ...

    def pre_savepoint_rollback(self, event: Any) -> None:
        ...

    def post_savepoint_rollback(self, event: Any) -> None:
        ...

    # Statements ----------------------------------------------------------
    def pre_query(self, event: Any) -> None:
        ...

    def post_query(self, event: Any) -> None:
        ...

    def pre_prepare(self, event: Any) -> None:
        ...

    def post_prepare(self, event: Any) -> None:
        ...

    def pre_exec(self, event: Any) -> None:
        ...

    def post_exec(self, event: Any) -> None:
        ...

    def pre_stmt_execute(self, event: Any) -> None:
        ...

    def post_stmt_execute(self, event: Any) -> None:
        ...

    def pre_fetch(self, event: Any) -> None:
        ...

    def post_fetch(self, event: Any) -> None:
        ...

    def pre_fetch_all(self, event: Any) -> None:
        ...

    def post_fetch_all(self, event: Any) -> None:
        ...

    def pre_error(self, event: Any) -> None:
        """A driver error occurred; ``event.exception`` holds it."""

    def post_error(self, event: Any) -> None:
        ...

    # Collections ---------------------------------------------------------
    def on_pre_collection_delete(self, collection: Any) -> None:
        """A collection of records is about to be deleted."""

    def on_collection_delete(self, collection: Any) -> None:
        """A collection of records has been deleted."""


@runtime_checkable
class Overloadable(Protocol):
    """
    Objects answering arbitrary method names through ``__getattr__``.
    """

    def __getattr__(self, name: str) -> Any:
        ...


class Listener(EventListener):
    """
    No-op listener. Subclass it and override the hooks you need.
    """


def install_hooks(cls: type, factory: Callable[[Hook], Callable[..., None]]) -> type:
    """
    Define one method per :class:`Hook` on ``cls`` using ``factory``.
    """
    for hook in Hook:
        method = factory(hook)
        method.__name__ = hook.value
        method.__qualname__ = f"{cls.__qualname__}.{hook.value}"
        setattr(cls, hook.value, method)
    return cls


class DynamicListener(Listener):
    """
    Listener routing every hook to a single ``handle(hook_name, payload)``.

    Attribute lookups for unknown public names also resolve to a forwarder,
    which makes the listener overloadable: it accepts hooks added after it was
    written, for example custom events sent through
    :meth:`ListenerChain.notify`.

    Hooks reach either the ``handler`` callable given to the constructor or an
    overridden :meth:`handle`; one of the two is required. A bare
    ``DynamicListener()`` can still be registered, but its first hook raises
    ``NotImplementedError``.
    """

    def __init__(self, handler: Optional[HookHandler] = None) -> None:
        self._handler = handler

    def handle(self, hook: str, payload: Any) -> None:
        if self._handler is None:
            raise NotImplementedError(
                f"{self.__class__.__name__} received {hook!r} but has no handler; "
                "pass handler=... or override handle()."
            )
        self._handler(hook, payload)

    def __getattr__(self, name: str) -> Callable[[Any], None]:
        if name.startswith("_"):
            raise AttributeError(name)

        def forward(payload: Any) -> None:
            self.handle(name, payload)

        return forward


def _forwarding_hook(hook: Hook) -> Callable[[DynamicListener, Any], None]:
    name = hook.value

    def forward(self: DynamicListener, payload: Any) -> None:
        self.handle(name, payload)

    return forward


install_hooks(DynamicListener, _forwarding_hook)


def supports_listener_contract(candidate: Any) -> bool:
    """
    Return True when ``candidate`` implements every hook or is overloadable.
    """
    if isinstance(candidate, type):
        return False
    return isinstance(candidate, (EventListener, Overloadable))
