"""
Error hierarchy for the instrumented connection layer.
"""


class DatabaseError(RuntimeError):
    """Base error for connection-related failures."""


class ConnectionConfigurationError(DatabaseError):
    """Raised when connection configuration is invalid."""


class ConnectionClosedError(DatabaseError):
    """Raised when an operation needs an open connection."""


class ExecutionError(DatabaseError):
    """Raised when the driver rejects a statement or fetch."""


class TransactionError(DatabaseError):
    """Raised when transaction operations are misused or fail."""
