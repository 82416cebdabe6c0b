"""Shared fixtures for useradmin tests."""

from __future__ import annotations

import pytest
import pytest_asyncio

from useradmin.config import UserAdminSettings
from useradmin.memory_store import MemoryUserRepository
from useradmin.models.user import DateOfBirth, UserCreate, UserRead
from useradmin.services.user_service import UserService

VALID_PHONE = "+99312345678"


@pytest.fixture
def memory_settings() -> UserAdminSettings:
    return UserAdminSettings(_env_file=None, use_memory_store=True)


@pytest.fixture
def store() -> MemoryUserRepository:
    return MemoryUserRepository()


@pytest.fixture
def service(store) -> UserService:
    return UserService(store)


@pytest.fixture
def full_user_payload() -> UserCreate:
    """A create request with every optional field set."""
    return UserCreate(
        phone_number=VALID_PHONE,
        first_name="Aman",
        last_name="Amanov",
        gender="male",
        date_of_birth=DateOfBirth(year=1990, month=5, day=17),
        location="Ashgabat",
        email="aman@example.com",
        profile_photo_url="https://cdn.example.com/aman.png",
    )


@pytest_asyncio.fixture
async def full_user(service, full_user_payload) -> UserRead:
    return await service.create_user(full_user_payload)
