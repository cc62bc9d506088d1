"""
Catalogue of lifecycle hooks a listener can react to.

Each :class:`Hook` value is the name of the listener method invoked for that
lifecycle point, so ``getattr(listener, hook.value)(payload)`` is all a
dispatcher needs.
"""

from __future__ import annotations

from enum import Enum
from typing import List


class HookFamily(str, Enum):
    RECORD = "record"
    CONNECTION = "connection"
    TRANSACTION = "transaction"
    SAVEPOINT = "savepoint"
    STATEMENT = "statement"
    COLLECTION = "collection"


class Hook(str, Enum):
    # Record lifecycle, payload is the record.
    ON_LOAD = "on_load"
    ON_PRE_LOAD = "on_pre_load"
    ON_SLEEP = "on_sleep"
    ON_WAKE_UP = "on_wake_up"

    # Connection lifecycle. ``on_open`` receives the connection itself.
    ON_OPEN = "on_open"
    PRE_CONNECT = "pre_connect"
    POST_CONNECT = "post_connect"
    PRE_CLOSE = "pre_close"
    POST_CLOSE = "post_close"

    PRE_TRANSACTION_BEGIN = "pre_transaction_begin"
    POST_TRANSACTION_BEGIN = "post_transaction_begin"
    PRE_TRANSACTION_COMMIT = "pre_transaction_commit"
    POST_TRANSACTION_COMMIT = "post_transaction_commit"
    PRE_TRANSACTION_ROLLBACK = "pre_transaction_rollback"
    POST_TRANSACTION_ROLLBACK = "post_transaction_rollback"

    PRE_SAVEPOINT_CREATE = "pre_savepoint_create"
    POST_SAVEPOINT_CREATE = "post_savepoint_create"
    PRE_SAVEPOINT_COMMIT = "pre_savepoint_commit"
    POST_SAVEPOINT_COMMIT = "post_savepoint_commit"
    PRE_SAVEPOINT_ROLLBACK = "pre_savepoint_rollback"
    POST_SAVEPOINT_ROLLBACK = "post_savepoint_rollback"

    PRE_QUERY = "pre_query"
    POST_QUERY = "post_query"
    PRE_PREPARE = "pre_prepare"
    POST_PREPARE = "post_prepare"
    PRE_EXEC = "pre_exec"
    POST_EXEC = "post_exec"
    PRE_STMT_EXECUTE = "pre_stmt_execute"
    POST_STMT_EXECUTE = "post_stmt_execute"
    PRE_FETCH = "pre_fetch"
    POST_FETCH = "post_fetch"
    PRE_FETCH_ALL = "pre_fetch_all"
    POST_FETCH_ALL = "post_fetch_all"
    PRE_ERROR = "pre_error"
    POST_ERROR = "post_error"

    # Collection lifecycle, payload is the collection.
    ON_PRE_COLLECTION_DELETE = "on_pre_collection_delete"
    ON_COLLECTION_DELETE = "on_collection_delete"

    @property
    def family(self) -> HookFamily:
        return _FAMILIES[self]


_FAMILIES: dict[Hook, HookFamily] = {}
for _hook in Hook:
    if _hook in (Hook.ON_LOAD, Hook.ON_PRE_LOAD, Hook.ON_SLEEP, Hook.ON_WAKE_UP):
        _FAMILIES[_hook] = HookFamily.RECORD
    elif _hook in (Hook.ON_PRE_COLLECTION_DELETE, Hook.ON_COLLECTION_DELETE):
        _FAMILIES[_hook] = HookFamily.COLLECTION
    elif "savepoint" in _hook.value:
        _FAMILIES[_hook] = HookFamily.SAVEPOINT
    elif "transaction" in _hook.value:
        _FAMILIES[_hook] = HookFamily.TRANSACTION
    elif _hook.value.endswith(("_open", "_connect", "_close")):
        _FAMILIES[_hook] = HookFamily.CONNECTION
    else:
        _FAMILIES[_hook] = HookFamily.STATEMENT
del _hook


def hooks_in(family: HookFamily) -> List[Hook]:
    """Return the hooks belonging to ``family`` in declaration order."""
    return [hook for hook in Hook if hook.family is family]


def hook_name(hook: Hook | str) -> str:
    """Resolve a :class:`Hook` or a bare method name to the method name."""
    if isinstance(hook, Hook):
        return hook.value
    return hook
