"""
═══════════════════════════════════════════════════════════════════════════════
UserAdmin — In-Memory хранилище (замена PostgreSQL для локальной разработки)
═══════════════════════════════════════════════════════════════════════════════

``MemoryUserRepository`` реализует тот же интерфейс, что и
``useradmin.db.repositories.user_repo.UserRepository``, и применяет
к строкам те же ``UpdatePlan``, что уходят в PostgreSQL.

Подключается в ``useradmin.main`` → lifespan() при ``USE_MEMORY_STORE=true``
или при недоступности БД вне production. Данные теряются при перезапуске.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from useradmin.db.statements import USER_COLUMNS, UpdatePlan

logger = logging.getLogger(__name__)


def _now() -> datetime:
    """Текущее время UTC без таймзоны, как TIMESTAMP в PostgreSQL."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


class MemoryUserRepository:
    """Хранилище пользователей в памяти процесса."""

    def __init__(self) -> None:
        self._users: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._users)

    @staticmethod
    def _project(user: dict[str, Any]) -> dict[str, Any]:
        return {column: user.get(column) for column in USER_COLUMNS}

    async def create_user(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Создаёт пользователя в памяти."""
        user_id = self._next_id
        self._next_id += 1
        user = {column: None for column in USER_COLUMNS}
        user.update(values)
        user["id"] = user_id
        user.setdefault("blocked", False)
        user["registration_date"] = _now()
        self._users[user_id] = user
        logger.info("UserAdmin memory store: created user %s", user_id)
        return self._project(user)

    async def get_user_by_id(self, user_id: int) -> dict[str, Any] | None:
        user = self._users.get(user_id)
        return self._project(user) if user else None

    async def list_users(self, after_id: int, limit: int) -> list[dict[str, Any]]:
        ids = sorted(uid for uid in self._users if uid > after_id)[:limit]
        return [self._project(self._users[uid]) for uid in ids]

    async def update_user(self, plan: UpdatePlan) -> dict[str, Any] | None:
        user = self._users.get(plan.key)
        if user is None:
            return None
        for column, value in plan.assignments:
            user[column] = value
        return self._project(user)

    async def delete_user(self, user_id: int) -> int:
        return 1 if self._users.pop(user_id, None) is not None else 0

    async def set_blocked(self, user_id: int, blocked: bool) -> int:
        user = self._users.get(user_id)
        if user is None:
            return 0
        user["blocked"] = blocked
        return 1
