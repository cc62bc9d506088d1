"""
Naming utilities for listenerchain.
"""

import re


_FIRST_CAP_RE = re.compile("(.)([A-Z][a-z]+)")
_ALL_CAP_RE = re.compile("([a-z0-9])([A-Z])")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def camel_to_snake(name: str) -> str:
    """
    Convert ``CamelCase`` record class names to ``snake_case`` table names.
    """
    step1 = _FIRST_CAP_RE.sub(r"\1_\2", name)
    snake = _ALL_CAP_RE.sub(r"\1_\2", step1).lower()
    return snake


def is_identifier(name: str) -> bool:
    """Return True when ``name`` is safe to splice into SQL unquoted."""
    return bool(_IDENTIFIER_RE.match(name))


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'
