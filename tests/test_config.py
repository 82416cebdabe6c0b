"""Tests for environment-based settings."""

import pytest
from pydantic import ValidationError

from useradmin.config import UserAdminSettings

DB_ENV = ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "USE_MEMORY_STORE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in DB_ENV:
        monkeypatch.delenv(name, raising=False)


class TestUserAdminSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.local")
        monkeypatch.setenv("DB_PORT", "5433")
        monkeypatch.setenv("DB_USER", "admin")
        monkeypatch.setenv("DB_PASSWORD", "secret")
        monkeypatch.setenv("DB_NAME", "users")

        settings = UserAdminSettings(_env_file=None)

        assert settings.connection_params == {
            "host": "db.local",
            "port": 5433,
            "user": "admin",
            "password": "secret",
            "database": "users",
        }
        assert settings.api_port == 8200
        assert settings.default_page_size == 10

    def test_missing_values_listed_together(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "db.local")
        monkeypatch.setenv("DB_USER", "   ")

        with pytest.raises(ValidationError) as exc_info:
            UserAdminSettings(_env_file=None)

        message = str(exc_info.value)
        assert "DB_PORT" in message
        assert "DB_USER" in message
        assert "DB_PASSWORD" in message
        assert "DB_NAME" in message
        assert "DB_HOST," not in message

    def test_port_must_be_numeric(self):
        with pytest.raises(ValidationError):
            UserAdminSettings(
                _env_file=None,
                db_host="h", db_port="abc", db_user="u", db_password="p", db_name="n",
            )

    def test_memory_store_needs_no_database(self):
        settings = UserAdminSettings(_env_file=None, use_memory_store=True)
        assert settings.use_memory_store is True
