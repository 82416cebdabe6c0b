"""
useradmin/models/user.py — Модели пользователя (запросы и ответы).

Запросы на создание и обновление переводят сырые поля в ``OptionalValue``
на границе сервиса: ``UserCreate.to_values()`` и ``UserUpdate.to_changes()``.
Ответ ``UserRead`` собирается из строки БД в ``useradmin.services.reconciler``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from useradmin.models.common import UserAdminBase
from useradmin.models.optional import OptionalValue, classify_date, classify_text

# Необязательные колонки в каноническом порядке построения UPDATE
UPDATABLE_COLUMNS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "gender",
    "date_of_birth",
    "location",
    "email",
    "profile_photo_url",
)

TEXT_COLUMNS: tuple[str, ...] = tuple(c for c in UPDATABLE_COLUMNS if c != "date_of_birth")


class DateOfBirth(UserAdminBase):
    """Календарная дата без времени. ``(0, 0, 0)`` в запросе обновления очищает поле."""
    year: int = Field(..., ge=0, le=9999, examples=[1995])
    month: int = Field(..., ge=0, le=12, examples=[4])
    day: int = Field(..., ge=0, le=31, examples=[17])


class RegistrationTimestamp(BaseModel):
    """Дата регистрации, разложенная на компоненты."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


@dataclass(frozen=True)
class UserChanges:
    """
    Разреженный набор изменений пользователя.

    ``phone_number`` — ``None``, если номер не передан (очистить его нельзя).
    ``fields`` — состояние каждой необязательной колонки.
    """

    phone_number: str | None = None
    fields: dict[str, OptionalValue[Any]] = field(default_factory=dict)

    def get(self, column: str) -> OptionalValue[Any]:
        return self.fields.get(column, OptionalValue.absent())


class UserCreate(UserAdminBase):
    """Схема для создания пользователя."""
    phone_number: str = Field(..., examples=["+99312345678"])
    first_name: str | None = Field(default=None, examples=["Aman"])
    last_name: str | None = Field(default=None, examples=["Amanov"])
    gender: str | None = Field(default=None)
    date_of_birth: DateOfBirth | None = Field(default=None)
    location: str | None = Field(default=None, examples=["Ashgabat"])
    email: str | None = Field(default=None, examples=["aman@example.com"])
    profile_photo_url: str | None = Field(default=None)

    def to_values(self) -> dict[str, Any]:
        """
        Значения колонок для INSERT в порядке таблицы.

        Незаполненные и очищенные поля записываются как NULL —
        пустая строка в БД не попадает.
        """
        def storage(value: OptionalValue[Any]) -> Any:
            return value.value if value.is_present else None

        return {
            "first_name": storage(classify_text(self.first_name)),
            "last_name": storage(classify_text(self.last_name)),
            "phone_number": self.phone_number,
            "blocked": False,
            "gender": storage(classify_text(self.gender)),
            "date_of_birth": storage(classify_date(self.date_of_birth)),
            "location": storage(classify_text(self.location)),
            "email": storage(classify_text(self.email)),
            "profile_photo_url": storage(classify_text(self.profile_photo_url)),
        }


class UserUpdate(UserAdminBase):
    """
    Схема частичного обновления.

    Пропущенное или пустое поле не меняется; строка ``"null"``
    (для даты — ``{"year": 0, "month": 0, "day": 0}``) очищает поле.
    Неизвестные ключи отклоняются.
    """
    model_config = {**UserAdminBase.model_config, "extra": "forbid"}

    phone_number: str | None = Field(default=None, examples=["+99312345678"])
    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    date_of_birth: DateOfBirth | None = None
    location: str | None = None
    email: str | None = None
    profile_photo_url: str | None = None

    def to_changes(self) -> UserChanges:
        """Переводит запрос в ``UserChanges`` (единственная точка классификации)."""
        fields: dict[str, OptionalValue[Any]] = {}
        for column in UPDATABLE_COLUMNS:
            raw = getattr(self, column)
            if column == "date_of_birth":
                fields[column] = classify_date(raw)
            else:
                fields[column] = classify_text(raw)
        return UserChanges(
            phone_number=self.phone_number or None,
            fields=fields,
        )


class UserRead(BaseModel):
    """
    Схема для возврата данных пользователя.

    Незаданные текстовые поля — пустая строка, незаданная дата рождения — null.
    """
    id: int
    first_name: str = ""
    last_name: str = ""
    phone_number: str
    blocked: bool = False
    gender: str = ""
    date_of_birth: DateOfBirth | None = None
    location: str = ""
    email: str = ""
    profile_photo_url: str = ""
    registration_date: RegistrationTimestamp | None = None


class UsersPage(BaseModel):
    """Страница списка пользователей и токен следующей страницы."""
    users: list[UserRead] = Field(default_factory=list)
    next_page_token: str = ""
