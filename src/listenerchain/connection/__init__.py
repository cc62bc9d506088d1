"""
Instrumented SQLite connection driving connection, transaction and
statement hooks.
"""

from .config import ConnectionConfig, DSNConfig, parse_dsn
from .connection import InstrumentedConnection
from .errors import (
    ConnectionClosedError,
    ConnectionConfigurationError,
    DatabaseError,
    ExecutionError,
    TransactionError,
)
from .statement import Statement
from .transaction import TransactionManager

__all__ = [
    "ConnectionClosedError",
    "ConnectionConfig",
    "ConnectionConfigurationError",
    "DSNConfig",
    "DatabaseError",
    "ExecutionError",
    "InstrumentedConnection",
    "Statement",
    "TransactionError",
    "TransactionManager",
    "parse_dsn",
]
