"""
Composite listener forwarding lifecycle hooks to registered listeners.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterator, KeysView, List, Optional

from ..events.hooks import Hook, hook_name
from ..utils import get_logger
from .base import Listener, install_hooks, supports_listener_contract
from .errors import ConfigurationError


class ListenerChain(Listener):
    """
    Ordered collection of listeners that is itself a listener.

    Listeners registered without a name take the next integer position;
    named listeners live under their string key. Registering a name again
    replaces the listener in place, so the slot keeps its original dispatch
    position.

    Dispatch is sequential and fail-fast: an exception raised by a listener
    propagates to the caller and the listeners after it are not notified for
    that call.
    """

    def __init__(self) -> None:
        self._listeners: Dict[Hashable, Any] = {}
        self._next_index = 0
        self.logger = get_logger("listeners.chain")

    # ------------------------------------------------------------------ #
    # Registry
    # ------------------------------------------------------------------ #
    def add(self, listener: Any, name: Optional[str] = None) -> None:
        if not supports_listener_contract(listener):
            raise ConfigurationError(
                f"Couldn't add listener {listener!r}: listeners must implement every "
                "lifecycle hook (EventListener) or be Overloadable."
            )
        key: Hashable = self._next_index if name is None else name
        self.set(key, listener)
        self.logger.debug(
            "Listener registered",
            extra={"listener": type(listener).__name__, "key": key},
        )

    def get(self, key: Hashable) -> Any:
        return self._listeners.get(key)

    def set(self, key: Hashable, listener: Any) -> None:
        self._listeners[key] = listener
        if isinstance(key, int) and not isinstance(key, bool) and key >= self._next_index:
            self._next_index = key + 1

    def keys(self) -> KeysView[Hashable]:
        return self._listeners.keys()

    def listeners(self) -> List[Any]:
        return list(self._listeners.values())

    def __getitem__(self, key: Hashable) -> Any:
        return self._listeners[key]

    def __setitem__(self, key: Hashable, listener: Any) -> None:
        self.set(key, listener)

    def __contains__(self, key: object) -> bool:
        return key in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.listeners())

    def __repr__(self) -> str:
        keys = ", ".join(repr(key) for key in self._listeners)
        return f"<ListenerChain [{keys}]>"

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #
    def notify(self, hook: Hook | str, payload: Any) -> None:
        """
        Call the ``hook`` method of every listener with ``payload``.

        ``hook`` may also be a method name outside :class:`Hook`; only
        overloadable listeners are expected to answer those.
        """
        name = hook_name(hook)
        for listener in self.listeners():
            getattr(listener, name)(payload)


def _dispatching_hook(hook: Hook) -> Callable[[ListenerChain, Any], None]:
    def dispatch(self: ListenerChain, payload: Any) -> None:
        self.notify(hook, payload)

    dispatch.__doc__ = f"Forward ``{hook.value}`` to every registered listener."
    return dispatch


install_hooks(ListenerChain, _dispatching_hook)


def attach_listener(current: Any, listener: Any, name: Optional[str] = None) -> ListenerChain:
    """
    Combine ``listener`` with the listener currently held by a collaborator.

    When ``current`` is already a chain the listener is added to it. Otherwise
    a new chain is built holding ``current`` (if any) followed by ``listener``.
    The returned chain is the one the collaborator should keep.
    """
    if isinstance(current, ListenerChain):
        current.add(listener, name)
        return current
    chain = ListenerChain()
    if current is not None:
        chain.add(current)
    chain.add(listener, name)
    return chain
