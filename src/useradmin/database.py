"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — Пул соединений к базе данных (Database Connection Pool)
═══════════════════════════════════════════════════════════════════════════════

Пул соединений к PostgreSQL создаётся в lifespan приложения и передаётся
репозиторию явно через ``Database`` — глобального пула нет.

Каждый вызов ``Database`` — один запрос с собственным дедлайном
(``timeout``). Отмена asyncio-задачи прерывает ожидание соединения
и выполнение запроса.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from useradmin.config import UserAdminSettings

logger = logging.getLogger(__name__)


async def create_pool(settings: UserAdminSettings) -> asyncpg.Pool:
    """Создаёт пул соединений с параметрами из UserAdminSettings."""
    pool = await asyncpg.create_pool(
        **settings.connection_params,
        min_size=settings.db_pool_min,
        max_size=settings.db_pool_max,
        command_timeout=settings.db_command_timeout,
    )
    logger.info(
        f"UserAdmin DB pool created "
        f"(min={settings.db_pool_min}, max={settings.db_pool_max})"
    )
    return pool


def affected_rows(status: str) -> int:
    """
    Число затронутых строк из статуса команды (``"UPDATE 3"``, ``"DELETE 0"``).

    Для INSERT статус имеет вид ``"INSERT 0 1"`` — берётся последнее число.

    Raises:
        ValueError: статус не заканчивается числом.
    """
    return int(status.rsplit(" ", 1)[-1])


class Database:
    """
    Обёртка над пулом asyncpg.

    Использование::

        db = Database(pool, timeout=settings.db_command_timeout)
        row = await db.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
    """

    def __init__(self, pool: asyncpg.Pool, timeout: float | None = None):
        self._pool = pool
        self._timeout = timeout

    @property
    def pool(self) -> asyncpg.Pool:
        return self._pool

    async def fetch(self, query: str, *args: Any, timeout: float | None = None) -> list:
        """Выполняет запрос и возвращает все строки."""
        return await self._pool.fetch(query, *args, timeout=timeout or self._timeout)

    async def fetchrow(self, query: str, *args: Any, timeout: float | None = None):
        """Выполняет запрос и возвращает первую строку или ``None``."""
        return await self._pool.fetchrow(query, *args, timeout=timeout or self._timeout)

    async def execute(self, query: str, *args: Any, timeout: float | None = None) -> int:
        """Выполняет команду и возвращает число затронутых строк."""
        status = await self._pool.execute(query, *args, timeout=timeout or self._timeout)
        return affected_rows(status)

    async def close(self) -> None:
        """Закрывает пул соединений."""
        await self._pool.close()
        logger.info("UserAdmin DB pool closed")


async def check_connection(db: Database) -> bool:
    """Проверяет доступность PostgreSQL (health check)."""
    try:
        result = await db.fetchrow("SELECT 1 AS ok")
        return result is not None and result["ok"] == 1
    except Exception as e:
        logger.error(f"UserAdmin DB health check failed: {e}")
        return False
