"""
useradmin/validation.py — Проверка входных данных.

Номер телефона: ``+993`` и ровно 8 цифр (ASCII).
Идентификатор пользователя: целое число больше нуля. Строк с id больше
``MAX_USER_ID`` (предел int4 столбца ``users.id``) не бывает.
"""

from __future__ import annotations

import re

from useradmin.exceptions import InvalidArgumentError

PHONE_NUMBER_PATTERN = re.compile(r"^\+993\d{8}$", re.ASCII)

# users.id — SERIAL (int4)
MAX_USER_ID = 2**31 - 1


def is_valid_phone(phone_number: str) -> bool:
    """Проверяет номер телефона по шаблону ``^\\+993\\d{8}$``."""
    return PHONE_NUMBER_PATTERN.fullmatch(phone_number) is not None


def require_user_id(user_id: int) -> int:
    """
    Проверяет идентификатор пользователя (целое число > 0).

    Raises:
        InvalidArgumentError: идентификатор отсутствует, нулевой или отрицательный.
    """
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidArgumentError(
            "User ID must be a positive integer",
            details={"field": "id"},
        )
    return user_id


def is_storable_id(user_id: int) -> bool:
    """Помещается ли id в столбец ``users.id``; больших id в таблице нет."""
    return user_id <= MAX_USER_ID
