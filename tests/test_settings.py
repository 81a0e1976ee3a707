from dataclasses import FrozenInstanceError

import pytest

from todo_service.settings import DEFAULT_SECRET_KEY, Settings, get_settings

ENV_VARS = [
    "PERSISTENCE_BACKEND",
    "DATABASE_NAME",
    "SECRET_KEY",
    "HOST",
    "PORT",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestGetSettings:
    def test_defaults(self):
        s = get_settings()
        assert s == Settings()
        assert s.persistence_backend == "memory"
        assert s.database_name == "./data/todos.db"
        assert s.port == 3000
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"
        assert s.uses_default_secret is True

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
        monkeypatch.setenv("DATABASE_NAME", "/tmp/x.db")
        monkeypatch.setenv("SECRET_KEY", "s3cret")
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        s = get_settings()
        assert s.persistence_backend == "sqlite"
        assert s.database_name == "/tmp/x.db"
        assert s.secret_key == "s3cret"
        assert s.uses_default_secret is False
        assert s.host == "127.0.0.1"
        assert s.port == 8080
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.log_level == "DEBUG"

    def test_unknown_backend_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        assert get_settings().persistence_backend == "memory"

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_bad_port_uses_default(self, monkeypatch, port):
        monkeypatch.setenv("PORT", port)
        assert get_settings().port == 3000

    def test_bad_log_level_uses_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert get_settings().log_level == "INFO"

    def test_empty_secret_uses_default(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", "")
        assert get_settings().secret_key == DEFAULT_SECRET_KEY

    def test_settings_are_immutable(self):
        s = get_settings()
        with pytest.raises(FrozenInstanceError):
            s.secret_key = "other"  # type: ignore[misc]
