"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from archive_recovery.config import DEFAULT_API_BASE_URL, RestoreConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "RESTORE_API_BASE_URL",
        "RESTORE_PAGE_SIZE",
        "RESTORE_LIST_DELAY_MS",
        "RESTORE_MUTATE_DELAY_MS",
        "RESTORE_REQUEST_TIMEOUT_SEC",
        "LOG_LEVEL",
        "LOG_JSON",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir("/")


def test_defaults():
    cfg = load_config()
    assert cfg.restore.api_base_url == DEFAULT_API_BASE_URL
    assert cfg.restore.page_size == 50
    assert cfg.restore.list_delay_sec == pytest.approx(0.1)
    assert cfg.restore.mutate_delay_sec == pytest.approx(0.1)
    assert cfg.runtime.log_level == "INFO"
    assert cfg.runtime.log_json is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RESTORE_API_BASE_URL", "https://proxy.example.test/api/")
    monkeypatch.setenv("RESTORE_PAGE_SIZE", "20")
    monkeypatch.setenv("RESTORE_MUTATE_DELAY_MS", "250")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", "true")

    cfg = load_config()

    assert cfg.restore.api_base_url == "https://proxy.example.test/api"
    assert cfg.restore.page_size == 20
    assert cfg.restore.mutate_delay_ms == 250
    assert cfg.runtime.log_level == "DEBUG"
    assert cfg.runtime.log_json is True


def test_explicit_values_beat_environment(monkeypatch):
    monkeypatch.setenv("RESTORE_LIST_DELAY_MS", "500")
    cfg = load_config(restore={"list_delay_ms": 0})
    assert cfg.restore.list_delay_ms == 0


@pytest.mark.parametrize(
    ("env", "value"),
    [
        ("RESTORE_PAGE_SIZE", "0"),
        ("RESTORE_PAGE_SIZE", "many"),
        ("RESTORE_LIST_DELAY_MS", "-1"),
        ("RESTORE_API_BASE_URL", "ftp://example.test"),
        ("RESTORE_REQUEST_TIMEOUT_SEC", "0"),
        ("LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_values_fail_loading(monkeypatch, env, value):
    monkeypatch.setenv(env, value)
    with pytest.raises(RuntimeError, match="Configuration validation failed"):
        load_config()


def test_config_is_frozen():
    cfg = RestoreConfig()
    with pytest.raises(Exception):
        cfg.page_size = 10
