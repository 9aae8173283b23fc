"""
Configuration objects and helpers for the Polar client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import ApiEnvironment, build_environment
from .errors import PolarError
from .serialization import SerializerOptions

__all__ = [
    "ClientOptions",
    "ClientParameters",
    "ConfigError",
    "DEFAULT_USER_AGENT",
    "load_client_options",
]

__version__ = "0.1.0"

DEFAULT_USER_AGENT = f"polar-payments/{__version__}"

_PARAMETER_TO_ENV_KEY = {
    "access_token": "POLAR_ACCESS_TOKEN",
    "base_url": "POLAR_BASE_URL",
    "environment": "POLAR_ENVIRONMENT",
    "timeout_seconds": "POLAR_TIMEOUT_SECONDS",
    "max_retry_attempts": "POLAR_MAX_RETRY_ATTEMPTS",
    "initial_retry_delay_ms": "POLAR_INITIAL_RETRY_DELAY_MS",
    "max_retry_delay_ms": "POLAR_MAX_RETRY_DELAY_MS",
    "jitter_factor": "POLAR_JITTER_FACTOR",
    "requests_per_minute": "POLAR_REQUESTS_PER_MINUTE",
    "respect_retry_after": "POLAR_RESPECT_RETRY_AFTER",
    "user_agent": "POLAR_USER_AGENT",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, ApiEnvironment):
        return value.value
    return str(value)


class ConfigError(PolarError):
    """Raised when the supplied configuration is invalid."""


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientOptions`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_options`.
    """

    access_token: Optional[str] = None
    base_url: Optional[str] = None
    environment: Optional[ApiEnvironment | str] = None
    timeout_seconds: Optional[int | str] = None
    max_retry_attempts: Optional[int | str] = None
    initial_retry_delay_ms: Optional[int | str] = None
    max_retry_delay_ms: Optional[int | str] = None
    jitter_factor: Optional[float | str] = None
    requests_per_minute: Optional[int | str] = None
    respect_retry_after: Optional[bool | str] = None
    user_agent: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _int_setting(values: Mapping[str, str], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from exc


def _float_setting(values: Mapping[str, str], key: str, default: float) -> float:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got '{raw}'") from exc


def _bool_setting(values: Mapping[str, str], key: str, default: bool) -> bool:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got '{raw}'")


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ConfigError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class ClientOptions:
    access_token: str
    base_url: Optional[str] = None
    environment: ApiEnvironment = ApiEnvironment.PRODUCTION
    timeout_seconds: int = 30
    max_retry_attempts: int = 3
    initial_retry_delay_ms: int = 1000
    max_retry_delay_ms: int = 30000
    jitter_factor: float = 0.1
    requests_per_minute: int = 300
    respect_retry_after: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    serializer_options: SerializerOptions = field(default_factory=SerializerOptions)
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        token = (self.access_token or "").strip()
        if not token:
            raise ConfigError("POLAR_ACCESS_TOKEN must not be empty")
        object.__setattr__(self, "access_token", token)

        if isinstance(self.environment, str):
            try:
                object.__setattr__(self, "environment", ApiEnvironment.parse(self.environment))
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc

        if self.base_url is not None:
            base_url = self.base_url.strip().rstrip("/")
            if not base_url.startswith(("http://", "https://")):
                raise ConfigError(f"POLAR_BASE_URL must be an http(s) URL, got '{self.base_url}'")
            object.__setattr__(self, "base_url", base_url)

        _check_range("timeout_seconds", self.timeout_seconds, 1, 300)
        _check_range("max_retry_attempts", self.max_retry_attempts, 0, 10)
        _check_range("initial_retry_delay_ms", self.initial_retry_delay_ms, 100, 60000)
        _check_range("requests_per_minute", self.requests_per_minute, 1, 10000)
        if self.max_retry_delay_ms < self.initial_retry_delay_ms:
            raise ConfigError("max_retry_delay_ms must not be smaller than initial_retry_delay_ms")

        object.__setattr__(self, "jitter_factor", min(max(float(self.jitter_factor), 0.0), 1.0))
        object.__setattr__(self, "default_headers", dict(self.default_headers))
        if not self.user_agent:
            object.__setattr__(self, "user_agent", DEFAULT_USER_AGENT)

    @property
    def resolved_base_url(self) -> str:
        """The explicit ``base_url`` when given, otherwise the environment's host."""
        return self.base_url or self.environment.base_url

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientOptions":
        access_token = values.get("POLAR_ACCESS_TOKEN")
        if access_token is None:
            raise ConfigError("POLAR_ACCESS_TOKEN must be provided")

        environment_raw = values.get("POLAR_ENVIRONMENT") or ApiEnvironment.PRODUCTION.value
        try:
            environment = ApiEnvironment.parse(environment_raw)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        return cls(
            access_token=access_token,
            base_url=values.get("POLAR_BASE_URL") or None,
            environment=environment,
            timeout_seconds=_int_setting(values, "POLAR_TIMEOUT_SECONDS", 30),
            max_retry_attempts=_int_setting(values, "POLAR_MAX_RETRY_ATTEMPTS", 3),
            initial_retry_delay_ms=_int_setting(values, "POLAR_INITIAL_RETRY_DELAY_MS", 1000),
            max_retry_delay_ms=_int_setting(values, "POLAR_MAX_RETRY_DELAY_MS", 30000),
            jitter_factor=_float_setting(values, "POLAR_JITTER_FACTOR", 0.1),
            requests_per_minute=_int_setting(values, "POLAR_REQUESTS_PER_MINUTE", 300),
            respect_retry_after=_bool_setting(values, "POLAR_RESPECT_RETRY_AFTER", True),
            user_agent=values.get("POLAR_USER_AGENT") or DEFAULT_USER_AGENT,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        **explicit: Any,
    ) -> "ClientOptions":
        parameter_overrides = _collect_parameter_overrides(parameters, explicit)
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_options(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    environment: Optional[ApiEnvironment | str] = None,
    timeout_seconds: Optional[int | str] = None,
    max_retry_attempts: Optional[int | str] = None,
    initial_retry_delay_ms: Optional[int | str] = None,
    max_retry_delay_ms: Optional[int | str] = None,
    jitter_factor: Optional[float | str] = None,
    requests_per_minute: Optional[int | str] = None,
    respect_retry_after: Optional[bool | str] = None,
    user_agent: Optional[str] = None,
) -> ClientOptions:
    """
    Convenience wrapper that mirrors :meth:`ClientOptions.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return ClientOptions.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        access_token=access_token,
        base_url=base_url,
        environment=environment,
        timeout_seconds=timeout_seconds,
        max_retry_attempts=max_retry_attempts,
        initial_retry_delay_ms=initial_retry_delay_ms,
        max_retry_delay_ms=max_retry_delay_ms,
        jitter_factor=jitter_factor,
        requests_per_minute=requests_per_minute,
        respect_retry_after=respect_retry_after,
        user_agent=user_agent,
    )
