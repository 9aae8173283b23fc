"""
API environments and the environment-variable sources used for configuration.

The env helpers are lightweight: they understand .env files,
allow callers to layer overrides, and ultimately return a plain mapping that
can be fed into :class:`polar_payments.core.config.ClientOptions`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional

__all__ = [
    "ApiEnvironment",
    "EnvironmentSnapshot",
    "build_environment",
]


class ApiEnvironment(Enum):
    """The two Polar API hosts."""

    PRODUCTION = "production"
    SANDBOX = "sandbox"

    @property
    def base_url(self) -> str:
        return _BASE_URLS[self]

    @classmethod
    def parse(cls, value: str) -> "ApiEnvironment":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown Polar environment '{value}'")


_BASE_URLS = {
    ApiEnvironment.PRODUCTION: "https://api.polar.sh",
    ApiEnvironment.SANDBOX: "https://sandbox-api.polar.sh",
}


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        values[key.strip()] = value
    return values


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """A resolved set of environment variables used to configure the client."""

    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> EnvironmentSnapshot:
    """
    Assemble an :class:`EnvironmentSnapshot` from multiple sources.

    ``base`` defaults to :data:`os.environ`. ``env_file`` is optional; set it to
    ``None`` to skip file loading entirely. ``overrides`` always win.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in _parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return EnvironmentSnapshot(variables=merged)
