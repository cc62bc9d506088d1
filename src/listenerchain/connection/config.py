"""
Connection configuration and DSN parsing.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

from ..utils.naming import is_identifier
from ..utils.redaction import redact_query_params
from .errors import ConnectionConfigurationError

SQLITE_PREFIX = "sqlite:///"
MEMORY_URL = "sqlite:///:memory:"
_PRAGMA_VALUE_RE = re.compile(r"^-?[A-Za-z0-9_]+$")


@dataclass
class DSNConfig:
    driver: str
    path: str
    query: dict[str, str]

    def redacted(self) -> str:
        """
        Return the DSN with sensitive query values masked.
        """

        result = f"{self.driver}://{self.path}"
        if self.query:
            result += f"?{urlencode(redact_query_params(self.query))}"
        return result


def parse_dsn(dsn: str) -> DSNConfig:
    parsed = urlparse(dsn)
    return DSNConfig(
        driver=parsed.scheme,
        path=parsed.path or "",
        query={k: v[0] for k, v in parse_qs(parsed.query).items()},
    )


def _parse_float(value: str, *, key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConnectionConfigurationError(f"Invalid float value for '{key}': {value!r}") from exc


@dataclass
class ConnectionConfig:
    """
    Normalized configuration for :class:`InstrumentedConnection`.
    """

    url: str
    timeout: float | None = None
    pragmas: dict[str, Any] | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.url.startswith(SQLITE_PREFIX):
            raise ConnectionConfigurationError(
                f"Unsupported connection URL {self.redacted_dsn()!r}; expected '{SQLITE_PREFIX}<path>'."
            )

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a connection config by parsing the DSN string.
        """

        parsed = parse_dsn(dsn)
        query = dict(parsed.query)
        parsed_timeout = _parse_float(query.pop("timeout"), key="timeout") if "timeout" in query else None

        pragmas: dict[str, Any] = dict(query)
        pragmas.update(kwargs.pop("pragmas", None) or {})
        timeout = kwargs.pop("timeout", parsed_timeout)

        return cls(
            url=dsn.split("?", 1)[0],
            dsn=parsed,
            timeout=timeout,
            pragmas=pragmas or None,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        """
        Build a config from an environment variable containing a DSN.
        """

        value = os.getenv(env_var)
        if not value:
            raise ConnectionConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    def database_path(self) -> str:
        if self.url == MEMORY_URL:
            return ":memory:"
        return self.url[len(SQLITE_PREFIX) :]

    def redacted_dsn(self) -> str:
        """
        Return a DSN safe for logging (credentials removed).
        """

        if self.dsn:
            return self.dsn.redacted()
        return self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted

    def pragma_statements(self) -> list[str]:
        """
        Render configured pragmas as ``PRAGMA`` statements run after connecting.
        """

        statements = []
        for key, value in (self.pragmas or {}).items():
            rendered = str(value)
            if not is_identifier(key) or not _PRAGMA_VALUE_RE.match(rendered):
                raise ConnectionConfigurationError(f"Invalid pragma {key}={rendered!r}")
            statements.append(f"PRAGMA {key} = {rendered}")
        return statements
