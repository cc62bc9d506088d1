"""
listenerchain public package initialization.

Lifecycle hooks for a database-mapping layer, fanned out to any number of
listeners through a :class:`ListenerChain`.
"""

from .connection import ConnectionConfig, InstrumentedConnection, Statement  # noqa: F401
from .events import Event, Hook, HookFamily, Operation  # noqa: F401
from .listeners import (  # noqa: F401
    ConfigurationError,
    DynamicListener,
    EventListener,
    Listener,
    ListenerChain,
    LoggingListener,
    Overloadable,
    QueryProfiler,
)
from .records import Record, RecordCollection  # noqa: F401

__all__ = [
    "ConfigurationError",
    "ConnectionConfig",
    "DynamicListener",
    "Event",
    "EventListener",
    "Hook",
    "HookFamily",
    "InstrumentedConnection",
    "Listener",
    "ListenerChain",
    "LoggingListener",
    "Operation",
    "Overloadable",
    "QueryProfiler",
    "Record",
    "RecordCollection",
    "Statement",
]
