import importlib

from config import get_settings_module


def test_settings_module_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings_module() == "config.production"

    monkeypatch.setenv("APP_ENV", "test")
    assert get_settings_module() == "config.testing"

    monkeypatch.setenv("APP_ENV", " Prod ")
    assert get_settings_module() == "config.production"

    monkeypatch.setenv("APP_ENV", "staging")
    assert get_settings_module() == "config.development"

    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_testing_settings_use_in_process_cache():
    settings = importlib.import_module("config.testing")

    assert settings.REDIS_URL == ""
    assert settings.STATISTICS["max_wait_ms"] < 3000
    assert set(settings.DB_CONFIG) == {"host", "port", "user", "password", "database"}
