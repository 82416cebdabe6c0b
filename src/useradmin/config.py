"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — Настройки сервиса (Application Configuration)
═══════════════════════════════════════════════════════════════════════════════

Класс UserAdminSettings для сервиса администрирования пользователей.
Содержит настройки:
    • Database (PostgreSQL — host, port, user, password, db name, пул)
    • API server (host, port)
    • Пагинация (размер страницы по умолчанию и максимальный)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UserAdminSettings(BaseSettings):
    """
    Настройки сервиса администрирования пользователей.

    Все параметры читаются из переменных окружения или .env файла.
    Параметры подключения к БД обязательны и не могут быть пустыми:
    отсутствующие перечисляются одной ошибкой при первой загрузке.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Среда выполнения ──────────────────────────────────────────────────
    app_env: str = Field(
        default="development",
        description="Application environment: development | staging | production",
    )

    # ── Database ──────────────────────────────────────────────────────────
    db_host: str = Field(default="", description="PostgreSQL host")
    db_port: str = Field(default="", description="PostgreSQL port")
    db_user: str = Field(default="", description="PostgreSQL user")
    db_password: str = Field(default="", description="PostgreSQL password")
    db_name: str = Field(default="", description="PostgreSQL database name")
    db_pool_min: int = Field(default=2, ge=1)
    db_pool_max: int = Field(default=10, ge=2)
    db_command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Deadline in seconds for a single statement",
    )
    use_memory_store: bool = Field(
        default=False,
        description="Serve from the in-memory store instead of PostgreSQL",
    )

    # ── API server ────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8200, ge=1, le=65535)
    log_level: str = Field(default="INFO")

    # ── Пагинация ─────────────────────────────────────────────────────────
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _validate_required(self) -> "UserAdminSettings":
        """
        Проверяет обязательные параметры подключения к БД.

        Не проверяются, если включён in-memory store.
        """
        if self.use_memory_store:
            return self
        required = {
            "DB_HOST": self.db_host,
            "DB_PORT": self.db_port,
            "DB_USER": self.db_user,
            "DB_PASSWORD": self.db_password,
            "DB_NAME": self.db_name,
        }
        missing = [name for name, value in required.items() if not value.strip()]
        if missing:
            raise ValueError(
                "missing or empty required configuration values: "
                + ", ".join(missing)
            )
        if not self.db_port.strip().isdigit():
            raise ValueError(f"DB_PORT must be a port number, got {self.db_port!r}")
        return self

    @property
    def connection_params(self) -> dict:
        """Параметры для ``asyncpg.create_pool`` (без DSN-строки)."""
        return {
            "host": self.db_host,
            "port": int(self.db_port),
            "user": self.db_user,
            "password": self.db_password,
            "database": self.db_name,
        }


@lru_cache
def get_settings() -> UserAdminSettings:
    """
    Возвращает единственный экземпляр UserAdminSettings (singleton).

    Декоратор ``@lru_cache`` гарантирует, что объект создаётся
    только при первом вызове.
    """
    return UserAdminSettings()


__all__ = ["UserAdminSettings", "get_settings"]
