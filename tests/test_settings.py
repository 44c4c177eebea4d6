import importlib

from config import get_settings_module
from config.config import rule_overrides


def test_settings_module_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")
    assert get_settings_module() == "config.production"

    monkeypatch.setenv("APP_ENV", "Testing")
    assert get_settings_module() == "config.testing"

    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_explicit_env_wins_over_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    assert get_settings_module("test") == "config.testing"
    assert get_settings_module("staging") == "config.development"


def test_rule_overrides_only_include_set_variables(monkeypatch):
    monkeypatch.setenv("LATE_GRACE_MINUTES", "10")
    monkeypatch.setenv("MAX_SHIFTS_PER_DAY", "")
    monkeypatch.delenv("ADMIN_LEAD_MINUTES", raising=False)

    assert rule_overrides() == {"LATE_GRACE_MINUTES": 10}


def test_testing_settings_expose_db_config():
    settings = importlib.import_module("config.testing")

    assert settings.TESTING is True
    assert set(settings.DB_CONFIG) == {"host", "port", "user", "password", "database", "pool_size"}
