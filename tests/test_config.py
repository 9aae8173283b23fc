"""Tests for client options and environment layering."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from polar_payments import core
from polar_payments.core.config import (
    ClientOptions,
    ClientParameters,
    ConfigError,
    DEFAULT_USER_AGENT,
    load_client_options,
)
from polar_payments.core.environment import ApiEnvironment, build_environment


# ── ClientOptions ────────────────────────────────────────────


def test_defaults() -> None:
    options = ClientOptions(access_token="  tok  ")
    assert options.access_token == "tok"
    assert options.environment is ApiEnvironment.PRODUCTION
    assert options.resolved_base_url == "https://api.polar.sh"
    assert options.timeout_seconds == 30
    assert options.max_retry_attempts == 3
    assert options.initial_retry_delay_ms == 1000
    assert options.max_retry_delay_ms == 30000
    assert options.jitter_factor == pytest.approx(0.1)
    assert options.requests_per_minute == 300
    assert options.respect_retry_after is True
    assert options.user_agent == DEFAULT_USER_AGENT


def test_sandbox_environment_from_string() -> None:
    options = ClientOptions(access_token="tok", environment="Sandbox")
    assert options.resolved_base_url == "https://sandbox-api.polar.sh"


def test_explicit_base_url_wins() -> None:
    options = ClientOptions(
        access_token="tok",
        environment=ApiEnvironment.SANDBOX,
        base_url="http://localhost:8000/",
    )
    assert options.resolved_base_url == "http://localhost:8000"


@pytest.mark.parametrize(
    "overrides",
    [
        {"access_token": ""},
        {"access_token": "   "},
        {"environment": "staging"},
        {"base_url": "ftp://example.com"},
        {"timeout_seconds": 0},
        {"timeout_seconds": 301},
        {"max_retry_attempts": 11},
        {"max_retry_attempts": -1},
        {"initial_retry_delay_ms": 99},
        {"requests_per_minute": 0},
        {"requests_per_minute": 10001},
        {"initial_retry_delay_ms": 5000, "max_retry_delay_ms": 1000},
    ],
)
def test_invalid_options_are_rejected(overrides) -> None:
    values = {"access_token": "tok", **overrides}
    with pytest.raises(ConfigError):
        ClientOptions(**values)


def test_jitter_is_clamped() -> None:
    assert ClientOptions(access_token="tok", jitter_factor=3).jitter_factor == 1.0
    assert ClientOptions(access_token="tok", jitter_factor=-1).jitter_factor == 0.0


# ── from_mapping / environment ───────────────────────────────


def test_from_mapping_reads_every_setting() -> None:
    options = ClientOptions.from_mapping(
        {
            "POLAR_ACCESS_TOKEN": "tok",
            "POLAR_ENVIRONMENT": "sandbox",
            "POLAR_TIMEOUT_SECONDS": "45",
            "POLAR_MAX_RETRY_ATTEMPTS": "5",
            "POLAR_INITIAL_RETRY_DELAY_MS": "250",
            "POLAR_MAX_RETRY_DELAY_MS": "8000",
            "POLAR_JITTER_FACTOR": "0.25",
            "POLAR_REQUESTS_PER_MINUTE": "120",
            "POLAR_RESPECT_RETRY_AFTER": "no",
            "POLAR_USER_AGENT": "shop/1.0",
        }
    )
    assert options.environment is ApiEnvironment.SANDBOX
    assert options.timeout_seconds == 45
    assert options.max_retry_attempts == 5
    assert options.initial_retry_delay_ms == 250
    assert options.max_retry_delay_ms == 8000
    assert options.jitter_factor == pytest.approx(0.25)
    assert options.requests_per_minute == 120
    assert options.respect_retry_after is False
    assert options.user_agent == "shop/1.0"


def test_from_mapping_requires_token() -> None:
    with pytest.raises(ConfigError, match="POLAR_ACCESS_TOKEN"):
        ClientOptions.from_mapping({})


@pytest.mark.parametrize(
    "key,value",
    [
        ("POLAR_TIMEOUT_SECONDS", "soon"),
        ("POLAR_JITTER_FACTOR", "lots"),
        ("POLAR_RESPECT_RETRY_AFTER", "maybe"),
    ],
)
def test_from_mapping_rejects_unparseable_values(key: str, value: str) -> None:
    with pytest.raises(ConfigError, match=key):
        ClientOptions.from_mapping({"POLAR_ACCESS_TOKEN": "tok", key: value})


def test_env_file_fills_gaps_but_overrides_win(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "POLAR_ACCESS_TOKEN='from-file'\n"
        "POLAR_ENVIRONMENT=sandbox\n"
        "POLAR_TIMEOUT_SECONDS=10\n",
        encoding="utf-8",
    )
    options = load_client_options(
        env_file=str(env_file),
        base={"POLAR_TIMEOUT_SECONDS": "20"},
        timeout_seconds=None,
        max_retry_attempts=1,
    )
    assert options.access_token == "from-file"
    assert options.environment is ApiEnvironment.SANDBOX
    assert options.timeout_seconds == 20
    assert options.max_retry_attempts == 1


def test_parameters_bundle_and_keywords_merge(tmp_path: Path) -> None:
    options = load_client_options(
        env_file=str(tmp_path / "missing.env"),
        base={},
        parameters=ClientParameters(access_token="bundle", respect_retry_after=False),
        access_token="keyword",
    )
    assert options.access_token == "keyword"
    assert options.respect_retry_after is False


def test_unknown_explicit_parameter_is_rejected() -> None:
    with pytest.raises(TypeError):
        ClientOptions.from_env(env_file=None, base={}, access_token="tok", colour="blue")


def test_build_environment_layers(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text('A=file\nB="file"\n', encoding="utf-8")
    snapshot = build_environment(
        env_file=str(env_file), base={"A": "base"}, overrides={"C": "override"}
    )
    assert snapshot.get("A") == "base"
    assert snapshot.get("B") == "file"
    assert snapshot.get("C") == "override"
    assert snapshot.get("D", "default") == "default"


def test_unknown_environment_name() -> None:
    with pytest.raises(ValueError):
        ApiEnvironment.parse("staging")


def test_env_file_values_never_reach_process_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("POLAR_ACCESS_TOKEN", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("POLAR_ACCESS_TOKEN=from-file\n", encoding="utf-8")
    snapshot = build_environment(env_file=str(env_file))
    assert snapshot.get("POLAR_ACCESS_TOKEN") == "from-file"
    assert "POLAR_ACCESS_TOKEN" not in os.environ
    assert "load_env_file" not in core.__all__
