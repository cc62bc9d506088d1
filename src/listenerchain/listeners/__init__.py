"""
Listener contracts, the listener chain and bundled listeners.
"""

from .audit import LoggingListener
from .base import DynamicListener, EventListener, Listener, Overloadable, supports_listener_contract
from .chain import ListenerChain, attach_listener
from .errors import ConfigurationError, ListenerError
from .profiler import QueryProfiler, QueryStat

__all__ = [
    "ConfigurationError",
    "DynamicListener",
    "EventListener",
    "Listener",
    "ListenerChain",
    "ListenerError",
    "LoggingListener",
    "Overloadable",
    "QueryProfiler",
    "QueryStat",
    "attach_listener",
    "supports_listener_contract",
]
