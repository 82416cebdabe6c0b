"""
useradmin/models/common.py — Базовые типы моделей сервиса.
"""

from pydantic import BaseModel


class UserAdminBase(BaseModel):
    """Базовая Pydantic-модель для схем сервиса."""

    model_config = {"str_strip_whitespace": True}
