"""
useradmin/services/user_service.py — Сервис администрирования пользователей.

Каждая операция — одна независимая единица работы: проверка входных
данных, один запрос к хранилищу, маппинг строки в ``UserRead``.

Ошибки:
    • InvalidArgumentError — неверный телефон / id / токен, нечего обновлять;
    • NotFoundError        — запрос не затронул ни одной строки;
    • InternalError        — любой сбой хранилища (пишется в лог целиком,
      клиенту уходит обезличенное сообщение).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from useradmin.db.repositories.user_repo import UserStore
from useradmin.db.statements import build_user_update
from useradmin.exceptions import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    UserAdminError,
)
from useradmin.models.user import UserChanges, UserCreate, UserRead, UsersPage, UserUpdate
from useradmin.services.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    next_page_token,
    resolve_window,
)
from useradmin.services.reconciler import reconcile_user
from useradmin.validation import is_storable_id, is_valid_phone, require_user_id

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _store_errors(action: str) -> AsyncIterator[None]:
    """Переводит любой сбой хранилища в InternalError (доменные ошибки — как есть)."""
    try:
        yield
    except UserAdminError:
        raise
    except Exception as exc:
        logger.exception("Error %s: %s", action, exc)
        raise InternalError() from exc


def _require_existing_id(user_id: int) -> None:
    """Проверяет id; id вне диапазона users.id заведомо не существует."""
    require_user_id(user_id)
    if not is_storable_id(user_id):
        logger.info("User not found with ID: %d", user_id)
        raise NotFoundError("User", user_id)


class UserService:
    """Операции над пользователями поверх внедрённого хранилища."""

    def __init__(
        self,
        store: UserStore,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._store = store
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    # ═══════════════════════════════════════════════════════════════════════
    # ЧТЕНИЕ
    # ═══════════════════════════════════════════════════════════════════════

    async def get_user(self, user_id: int) -> UserRead:
        """Возвращает пользователя по id."""
        _require_existing_id(user_id)
        async with _store_errors("fetching user by ID"):
            row = await self._store.get_user_by_id(user_id)
            if row is None:
                raise NotFoundError("User", user_id)
            return reconcile_user(row)

    async def list_users(self, page_size: int = 0, page_token: str = "") -> UsersPage:
        """Возвращает страницу пользователей (keyset по id)."""
        window = resolve_window(
            page_size,
            page_token,
            default_size=self._default_page_size,
            max_size=self._max_page_size,
        )
        if not is_storable_id(window.after_id + 1):
            return UsersPage()
        async with _store_errors("listing users"):
            rows = await self._store.list_users(window.after_id, window.limit)
            users = [reconcile_user(row) for row in rows]
        return UsersPage(users=users, next_page_token=next_page_token(rows, window))

    # ═══════════════════════════════════════════════════════════════════════
    # ИЗМЕНЕНИЕ
    # ═══════════════════════════════════════════════════════════════════════

    async def create_user(self, data: UserCreate) -> UserRead:
        """Создаёт пользователя (blocked=false, id и дату регистрации назначает БД)."""
        if not is_valid_phone(data.phone_number):
            raise InvalidArgumentError(
                "Invalid phone number format",
                details={"field": "phone_number"},
            )
        values = data.to_values()

        async with _store_errors("creating user"):
            row = await self._store.create_user(values)
            if row is None:
                raise RuntimeError("INSERT ... RETURNING produced no row")
            user = reconcile_user(row)

        logger.info("User with ID %d successfully created", user.id)
        return user

    async def update_user(self, user_id: int, data: UserUpdate | UserChanges) -> UserRead:
        """
        Частично обновляет пользователя одним UPDATE … RETURNING.

        Поля в состоянии ABSENT не меняются, CLEAR — обнуляются.
        """
        changes = data.to_changes() if isinstance(data, UserUpdate) else data
        plan = build_user_update(user_id, changes)
        _require_existing_id(user_id)

        async with _store_errors("updating user"):
            row = await self._store.update_user(plan)
            if row is None:
                logger.info("User not found with ID: %d", user_id)
                raise NotFoundError("User", user_id)
            user = reconcile_user(row)

        logger.info(
            "User with ID %d successfully updated (%s)",
            user_id, ", ".join(plan.columns),
        )
        return user

    async def delete_user(self, user_id: int) -> None:
        """Удаляет пользователя без возможности восстановления."""
        _require_existing_id(user_id)
        async with _store_errors("deleting user"):
            deleted = await self._store.delete_user(user_id)
        if deleted == 0:
            logger.info("User not found with ID: %d", user_id)
            raise NotFoundError("User", user_id)
        logger.info("User with ID %d successfully deleted", user_id)

    async def set_blocked(self, user_id: int, blocked: bool) -> None:
        """Устанавливает флаг blocked."""
        _require_existing_id(user_id)
        async with _store_errors("updating user status"):
            updated = await self._store.set_blocked(user_id, blocked)
        if updated == 0:
            logger.info("User not found with ID: %d", user_id)
            raise NotFoundError("User", user_id)
        logger.info(
            "User with ID %d successfully %s",
            user_id, "blocked" if blocked else "unblocked",
        )

    async def block_user(self, user_id: int) -> None:
        await self.set_blocked(user_id, True)

    async def unblock_user(self, user_id: int) -> None:
        await self.set_blocked(user_id, False)
