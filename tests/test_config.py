"""Configuration tests"""
import pytest

from src.utils.config import ConfirmationConfig


def test_defaults():
    config = ConfirmationConfig()

    assert config.ttl_seconds == 600
    assert config.store_backend == "memory"
    assert config.error_page_path == "/Error/General"


def test_from_env(monkeypatch):
    monkeypatch.setenv("CONFIRMATION_TTL_SECONDS", "120")
    monkeypatch.setenv("CONFIRMATION_STORE", "SQL")
    monkeypatch.setenv("CONFIRMATION_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("CONFIRMATION_PAGE_PATH", "/Confirm")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = ConfirmationConfig.from_env()

    assert config.ttl_seconds == 120
    assert config.store_backend == "sql"
    assert config.confirmation_page_path == "/Confirm"
    assert config.to_dict()["log_level"] == "DEBUG"


def test_rejects_unknown_backend():
    with pytest.raises(ValueError):
        ConfirmationConfig(store_backend="redis")


def test_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        ConfirmationConfig(ttl_seconds=0)
