"""
useradmin.models — Модели данных сервиса.

Реэкспорт основных классов для удобства:
    from useradmin.models import UserRead, UserUpdate
"""

from useradmin.models.optional import FieldState, OptionalValue  # noqa: F401
from useradmin.models.user import (  # noqa: F401
    DateOfBirth,
    RegistrationTimestamp,
    UserChanges,
    UserCreate,
    UserRead,
    UsersPage,
    UserUpdate,
)
