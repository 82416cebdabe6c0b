"""
useradmin/services/pagination.py — Keyset-пагинация списка пользователей.

Токен страницы — десятичный id последней строки предыдущей страницы.
Запрос выбирает строки с ``id > token`` в порядке ``id``, не более
``page_size`` штук. Токен следующей страницы — id последней строки, если
страница заполнена целиком, иначе пустая строка (данные закончились).

Keyset, а не OFFSET: при вставках и удалениях между запросами страниц
OFFSET пропускает или дублирует строки, keyset — нет.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from useradmin.exceptions import InvalidArgumentError

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class KeysetWindow:
    """Окно выборки: строки с ``id > after_id``, не более ``limit``."""
    after_id: int
    limit: int


def resolve_window(
    page_size: int,
    page_token: str = "",
    default_size: int = DEFAULT_PAGE_SIZE,
    max_size: int = MAX_PAGE_SIZE,
) -> KeysetWindow:
    """
    Вычисляет окно выборки по размеру страницы и токену.

    ``page_size <= 0`` → размер по умолчанию; больше максимума → максимум.

    Raises:
        InvalidArgumentError: токен не является неотрицательным целым числом.
    """
    if page_size <= 0:
        page_size = default_size
    page_size = min(page_size, max_size)

    token = (page_token or "").strip()
    if not token:
        return KeysetWindow(after_id=0, limit=page_size)
    if not token.isascii() or not token.isdigit():
        raise InvalidArgumentError(
            "Invalid page token",
            details={"field": "page_token"},
        )
    return KeysetWindow(after_id=int(token), limit=page_size)


def next_page_token(rows: Sequence[Mapping[str, Any]], window: KeysetWindow) -> str:
    """Токен следующей страницы или ``""``, если страница неполная."""
    if len(rows) < window.limit:
        return ""
    return str(rows[-1]["id"])
