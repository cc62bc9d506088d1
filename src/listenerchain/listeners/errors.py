"""
Error hierarchy for listener registration.
"""


class ListenerError(RuntimeError):
    """Base error for listener-related failures."""


class ConfigurationError(ListenerError):
    """Raised when an object offered as a listener cannot receive lifecycle hooks."""
