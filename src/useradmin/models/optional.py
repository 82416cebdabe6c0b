"""
useradmin/models/optional.py — Три состояния поля частичного обновления.

Каждое необязательное поле запроса на обновление находится ровно
в одном из состояний:

    • ABSENT   — поле не передано, хранимое значение не трогаем;
    • CLEAR    — поле явно очищается, в БД пишется NULL;
    • PRESENT  — поле несёт конкретное непустое значение.

Классификация сырого значения выполняется один раз на границе запроса
(``classify_text`` / ``classify_date``); дальше бизнес-логика работает
только с ``OptionalValue`` и не знает о маркерах очистки.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from useradmin.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from useradmin.models.user import DateOfBirth

T = TypeVar("T")

# Маркер очистки текстового поля
CLEAR_MARKER = "null"


class FieldState(str, Enum):
    """Состояние поля частичного обновления."""
    ABSENT = "absent"
    CLEAR = "clear"
    PRESENT = "present"


@dataclass(frozen=True)
class OptionalValue(Generic[T]):
    """Значение поля вместе с его состоянием (Absent / Clear / Present)."""

    state: FieldState
    value: T | None = None

    def __post_init__(self) -> None:
        if self.state is FieldState.PRESENT and self.value is None:
            raise ValueError("PRESENT value requires a concrete value")
        if self.state is not FieldState.PRESENT and self.value is not None:
            raise ValueError(f"{self.state.value.upper()} value must not carry a value")

    @classmethod
    def absent(cls) -> "OptionalValue[Any]":
        return cls(FieldState.ABSENT)

    @classmethod
    def clear(cls) -> "OptionalValue[Any]":
        return cls(FieldState.CLEAR)

    @classmethod
    def present(cls, value: T) -> "OptionalValue[T]":
        return cls(FieldState.PRESENT, value)

    @property
    def is_absent(self) -> bool:
        return self.state is FieldState.ABSENT

    @property
    def is_clear(self) -> bool:
        return self.state is FieldState.CLEAR

    @property
    def is_present(self) -> bool:
        return self.state is FieldState.PRESENT

    def to_storage(self) -> T | None:
        """
        Значение для записи в БД: NULL для CLEAR, само значение для PRESENT.

        Raises:
            ValueError: для ABSENT — такое поле в запрос не попадает.
        """
        if self.is_absent:
            raise ValueError("ABSENT value has no storage representation")
        return self.value


ABSENT: OptionalValue[Any] = OptionalValue.absent()
CLEAR: OptionalValue[Any] = OptionalValue.clear()


def classify_text(raw: str | None) -> OptionalValue[str]:
    """
    Классифицирует сырое текстовое значение.

    Порядок проверок: маркер ``"null"`` → пусто (``None`` / ``""``) → значение.
    """
    if raw == CLEAR_MARKER:
        return CLEAR
    if raw is None or raw == "":
        return ABSENT
    return OptionalValue.present(raw)


def classify_date(raw: DateOfBirth | None, field: str = "date_of_birth") -> OptionalValue[date]:
    """
    Классифицирует дату (год, месяц, день).

    Порядок проверок: тройка ``(0, 0, 0)`` → ``None`` → дата.

    Raises:
        InvalidArgumentError: тройка не образует корректную календарную дату.
    """
    if raw is not None and raw.year == 0 and raw.month == 0 and raw.day == 0:
        return CLEAR
    if raw is None:
        return ABSENT
    try:
        return OptionalValue.present(date(raw.year, raw.month, raw.day))
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid {field}: {raw.year:04d}-{raw.month:02d}-{raw.day:02d}",
            details={"field": field},
        ) from exc
