import pytest

from record_store.utilities.config import DEFAULT_DATABASE_URI, Settings


def test_defaults(monkeypatch):
    for name in ("SQLALCHEMY_DATABASE_URI", "RECORD_STORE_PAGE_SIZE", "RECORD_STORE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.database_uri == DEFAULT_DATABASE_URI
    assert settings.page_size == 100
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("SQLALCHEMY_DATABASE_URI", "postgresql://user@db/records")
    monkeypatch.setenv("RECORD_STORE_PAGE_SIZE", "25")
    monkeypatch.setenv("RECORD_STORE_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.as_dict() == {
        "database_uri": "postgresql://user@db/records",
        "page_size": 25,
        "log_level": "DEBUG",
    }


def test_rejects_non_positive_page_size(monkeypatch):
    monkeypatch.setenv("RECORD_STORE_PAGE_SIZE", "0")
    with pytest.raises(ValueError):
        Settings.from_env()
