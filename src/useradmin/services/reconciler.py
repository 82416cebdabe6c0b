"""
useradmin/services/reconciler.py — Маппинг строки БД → UserRead.

Используется всеми операциями чтения (get, list, create, update), чтобы
представление незаданных полей было одинаковым:

    • текстовая колонка NULL  → ``""``, иначе — значение без изменений;
    • date_of_birth NULL      → ``None``, иначе — ``DateOfBirth``;
    • registration_date       → ``RegistrationTimestamp`` (в UTC, если
      значение содержит часовой пояс).
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Mapping

from useradmin.models.user import (
    TEXT_COLUMNS,
    DateOfBirth,
    RegistrationTimestamp,
    UserRead,
)


def text_or_empty(value: str | None) -> str:
    """NULL → пустая строка."""
    return "" if value is None else value


def date_of_birth_from_storage(value: date | None) -> DateOfBirth | None:
    if value is None:
        return None
    return DateOfBirth(year=value.year, month=value.month, day=value.day)


def registration_from_storage(value: datetime | None) -> RegistrationTimestamp | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return RegistrationTimestamp(
        year=value.year,
        month=value.month,
        day=value.day,
        hour=value.hour,
        minute=value.minute,
        second=value.second,
    )


def reconcile_user(row: Mapping[str, Any]) -> UserRead:
    """Конвертирует строку из БД (Record / dict) → UserRead."""
    texts = {column: text_or_empty(row[column]) for column in TEXT_COLUMNS}
    return UserRead(
        id=row["id"],
        phone_number=row["phone_number"],
        blocked=bool(row["blocked"]),
        date_of_birth=date_of_birth_from_storage(row["date_of_birth"]),
        registration_date=registration_from_storage(row["registration_date"]),
        **texts,
    )
