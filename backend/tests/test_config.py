"""Tests for settings loading."""

import pytest

from budget_api.config import Settings, get_settings
from budget_api.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ACTUAL_SERVER_URL", "ACTUAL_SERVER_PASSWORD", "ACTUAL_BUDGET_SYNC_ID",
        "ACTUAL_BUDGET_PASSWORD", "WRAPPER_PORT", "DATA_DIR", "REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    """Should default port, host, data dir and timeout."""
    settings = Settings(_env_file=None)
    assert settings.wrapper_port == 3000
    assert settings.wrapper_host == "0.0.0.0"
    assert settings.data_dir == "./data"
    assert settings.timeout == 30.0
    assert settings.missing_required() == ["ACTUAL_SERVER_URL", "ACTUAL_BUDGET_SYNC_ID"]


def test_reads_environment(monkeypatch):
    """Should read values from the environment."""
    monkeypatch.setenv("ACTUAL_SERVER_URL", "http://actual:5006")
    monkeypatch.setenv("ACTUAL_BUDGET_SYNC_ID", "abc-123")
    monkeypatch.setenv("WRAPPER_PORT", "8080")
    monkeypatch.setenv("DATA_DIR", "/var/lib/budget")

    settings = Settings(_env_file=None)

    assert settings.actual_server_url == "http://actual:5006"
    assert settings.actual_budget_sync_id == "abc-123"
    assert settings.wrapper_port == 8080
    assert settings.data_dir == "/var/lib/budget"
    assert settings.missing_required() == []


def test_blank_values_are_unset(monkeypatch):
    """Should treat blank values as unset."""
    monkeypatch.setenv("ACTUAL_SERVER_URL", "  ")
    monkeypatch.setenv("ACTUAL_SERVER_PASSWORD", "")
    settings = Settings(_env_file=None)
    assert settings.actual_server_url is None
    assert settings.actual_server_password is None


def test_zero_timeout_disables_limit():
    """Should disable the timeout when it is zero."""
    assert Settings(_env_file=None, request_timeout_seconds=0).timeout is None


def test_get_settings_reports_bad_values(monkeypatch):
    """Should report malformed values as ConfigurationError."""
    monkeypatch.setenv("WRAPPER_PORT", "not-a-port")
    with pytest.raises(ConfigurationError, match="WRAPPER_PORT"):
        get_settings()


def test_get_settings_is_cached(monkeypatch):
    """Should build settings once per process."""
    monkeypatch.setenv("ACTUAL_SERVER_URL", "http://actual:5006")
    assert get_settings() is get_settings()
