"""
useradmin/db/statements.py — Построение параметризованных SQL-запросов.

``UpdateBuilder`` хранит упорядоченный список присваиваний
``(колонка, значение)``; текст запроса и список позиционных параметров
(``$1``, ``$2``, …) выводятся из одного и того же списка, поэтому число
плейсхолдеров всегда совпадает с числом аргументов.

``build_user_update`` собирает UPDATE пользователя из ``UserChanges``:

    1. Номер телефона (если передан) — проверка формата, первое присваивание.
    2. Необязательные колонки в каноническом порядке:
       ABSENT → пропуск, CLEAR → NULL, PRESENT → значение.
    3. Идентификатор пользователя — последний параметр (``WHERE id = $n``).
    4. Пустой набор присваиваний — ошибка InvalidArgument, запрос не строится.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Sequence

from useradmin.exceptions import InvalidArgumentError
from useradmin.models.optional import OptionalValue
from useradmin.models.user import UPDATABLE_COLUMNS, UserChanges
from useradmin.validation import is_valid_phone, require_user_id

USERS_TABLE = "users"

# Проекция RETURNING / SELECT для всех операций чтения
USER_COLUMNS: tuple[str, ...] = (
    "id",
    "first_name",
    "last_name",
    "phone_number",
    "blocked",
    "gender",
    "date_of_birth",
    "location",
    "email",
    "profile_photo_url",
    "registration_date",
)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


class Statement(NamedTuple):
    """Текст SQL-запроса и его позиционные параметры."""
    sql: str
    args: tuple[Any, ...]


@dataclass(frozen=True)
class UpdatePlan:
    """Готовый UPDATE: присваивания, ключ строки и проекция RETURNING."""

    table: str
    key_column: str
    key: Any
    assignments: tuple[tuple[str, Any], ...]
    returning: tuple[str, ...] = ()

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(column for column, _ in self.assignments)

    def to_statement(self) -> Statement:
        set_clause = ", ".join(
            f"{column} = ${index}"
            for index, (column, _) in enumerate(self.assignments, start=1)
        )
        sql = (
            f"UPDATE {self.table} SET {set_clause} "
            f"WHERE {self.key_column} = ${len(self.assignments) + 1}"
        )
        if self.returning:
            sql += " RETURNING " + ", ".join(self.returning)
        args = tuple(value for _, value in self.assignments) + (self.key,)
        return Statement(sql, args)


class UpdateBuilder:
    """Накопитель присваиваний для одного UPDATE."""

    def __init__(self, table: str):
        self._table = _check_identifier(table)
        self._assignments: list[tuple[str, Any]] = []

    def __len__(self) -> int:
        return len(self._assignments)

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        """Добавляет присваивание; ``None`` записывается как NULL."""
        _check_identifier(column)
        if any(existing == column for existing, _ in self._assignments):
            raise ValueError(f"Column {column!r} is already assigned")
        self._assignments.append((column, value))
        return self

    def apply(self, column: str, value: OptionalValue[Any]) -> "UpdateBuilder":
        """Добавляет присваивание по состоянию поля (ABSENT пропускается)."""
        if value.is_absent:
            return self
        return self.set(column, value.to_storage())

    def build(
        self,
        key_column: str,
        key: Any,
        returning: Sequence[str] = (),
    ) -> UpdatePlan:
        if not self._assignments:
            raise ValueError("UPDATE requires at least one assignment")
        return UpdatePlan(
            table=self._table,
            key_column=_check_identifier(key_column),
            key=key,
            assignments=tuple(self._assignments),
            returning=tuple(_check_identifier(c) for c in returning),
        )


def insert_statement(
    table: str,
    values: Mapping[str, Any],
    returning: Sequence[str] = (),
) -> Statement:
    """INSERT по упорядоченному словарю ``колонка → значение``."""
    columns = [_check_identifier(c) for c in values]
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    sql = (
        f"INSERT INTO {_check_identifier(table)} ({', '.join(columns)}) "
        f"VALUES ({placeholders})"
    )
    if returning:
        sql += " RETURNING " + ", ".join(_check_identifier(c) for c in returning)
    return Statement(sql, tuple(values.values()))


def build_user_update(user_id: int, changes: UserChanges) -> UpdatePlan:
    """
    Строит UPDATE пользователя из разреженного набора изменений.

    Raises:
        InvalidArgumentError: некорректный id, неверный формат телефона
            или нечего обновлять.
    """
    require_user_id(user_id)

    builder = UpdateBuilder(USERS_TABLE)

    if changes.phone_number is not None:
        if not is_valid_phone(changes.phone_number):
            raise InvalidArgumentError(
                "Invalid phone number format",
                details={"field": "phone_number"},
            )
        builder.set("phone_number", changes.phone_number)

    for column in UPDATABLE_COLUMNS:
        builder.apply(column, changes.get(column))

    if not len(builder):
        raise InvalidArgumentError("No fields to update")

    return builder.build("id", user_id, returning=USER_COLUMNS)
