"""
useradmin/db/repositories/user_repo.py — Репозиторий пользователей (PostgreSQL).

Каждый метод — ровно один SQL-запрос через ``Database``.
Ошибки хранилища не перехватываются: их классифицирует ``UserService``.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from useradmin.database import Database
from useradmin.db.statements import (
    USER_COLUMNS,
    USERS_TABLE,
    UpdatePlan,
    insert_statement,
)

_PROJECTION = ", ".join(USER_COLUMNS)


class UserStore(Protocol):
    """Интерфейс хранилища пользователей (PostgreSQL или in-memory)."""

    async def create_user(self, values: Mapping[str, Any]) -> Mapping[str, Any]: ...

    async def get_user_by_id(self, user_id: int) -> Mapping[str, Any] | None: ...

    async def list_users(self, after_id: int, limit: int) -> list[Mapping[str, Any]]: ...

    async def update_user(self, plan: UpdatePlan) -> Mapping[str, Any] | None: ...

    async def delete_user(self, user_id: int) -> int: ...

    async def set_blocked(self, user_id: int, blocked: bool) -> int: ...


class UserRepository:
    """Хранилище пользователей в PostgreSQL."""

    def __init__(self, db: Database):
        self._db = db

    async def create_user(self, values: Mapping[str, Any]):
        """Создать пользователя; id и registration_date назначает БД."""
        statement = insert_statement(USERS_TABLE, values, returning=USER_COLUMNS)
        return await self._db.fetchrow(statement.sql, *statement.args)

    async def get_user_by_id(self, user_id: int):
        """Найти пользователя по id."""
        return await self._db.fetchrow(
            f"SELECT {_PROJECTION} FROM {USERS_TABLE} WHERE id = $1",
            user_id,
        )

    async def list_users(self, after_id: int, limit: int) -> list:
        """Страница пользователей с ``id > after_id`` в порядке id."""
        return await self._db.fetch(
            f"SELECT {_PROJECTION} FROM {USERS_TABLE} "
            "WHERE id > $1 ORDER BY id LIMIT $2",
            after_id, limit,
        )

    async def update_user(self, plan: UpdatePlan):
        """Выполнить UPDATE … RETURNING; ``None``, если строка не найдена."""
        statement = plan.to_statement()
        return await self._db.fetchrow(statement.sql, *statement.args)

    async def delete_user(self, user_id: int) -> int:
        """Удалить пользователя; возвращает число удалённых строк."""
        return await self._db.execute(
            f"DELETE FROM {USERS_TABLE} WHERE id = $1", user_id
        )

    async def set_blocked(self, user_id: int, blocked: bool) -> int:
        """Обновить флаг blocked; возвращает число затронутых строк."""
        return await self._db.execute(
            f"UPDATE {USERS_TABLE} SET blocked = $1 WHERE id = $2",
            blocked, user_id,
        )
