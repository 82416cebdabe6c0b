"""Tests for UserService operations and error classification."""

import asyncio

import pytest

from useradmin.exceptions import InternalError, InvalidArgumentError, NotFoundError
from useradmin.memory_store import MemoryUserRepository
from useradmin.models.user import DateOfBirth, UserChanges, UserCreate, UserUpdate
from useradmin.models.optional import CLEAR
from useradmin.db.repositories.user_repo import UserRepository
from useradmin.services.user_service import UserService
from useradmin.validation import MAX_USER_ID

from tests.fakes import FakeDatabase

VALID_PHONE = "+99312345678"


class BrokenStore(MemoryUserRepository):
    """Every store call fails the way a lost connection would."""

    def __init__(self, exc: Exception):
        super().__init__()
        self.exc = exc

    async def get_user_by_id(self, user_id):
        raise self.exc

    async def list_users(self, after_id, limit):
        raise self.exc

    async def update_user(self, plan):
        raise self.exc

    async def delete_user(self, user_id):
        raise self.exc

    async def set_blocked(self, user_id, blocked):
        raise self.exc


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, service):
        user = await service.create_user(UserCreate(phone_number=VALID_PHONE))

        assert user.id == 1
        assert user.blocked is False
        assert user.first_name == ""
        assert user.date_of_birth is None
        assert user.registration_date is not None

    @pytest.mark.asyncio
    async def test_memory_store_stamps_like_timestamp_column(self, store):
        row = await store.create_user(UserCreate(phone_number=VALID_PHONE).to_values())

        assert row["registration_date"].tzinfo is None
        assert row["registration_date"].microsecond == 0

    @pytest.mark.asyncio
    async def test_create_round_trips_values(self, full_user, full_user_payload):
        assert full_user.first_name == full_user_payload.first_name
        assert full_user.email == full_user_payload.email
        assert full_user.date_of_birth == DateOfBirth(year=1990, month=5, day=17)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("phone", ["+993612345678", "99312345678", "+99412345678", ""])
    async def test_invalid_phone_rejected_without_write(self, service, store, phone):
        with pytest.raises(InvalidArgumentError):
            await service.create_user(UserCreate(phone_number=phone))
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_eight_digit_phone_accepted(self, service):
        user = await service.create_user(UserCreate(phone_number="+99361234567"))
        assert user.phone_number == "+99361234567"


class TestGetUser:
    @pytest.mark.asyncio
    async def test_get_existing(self, service, full_user):
        assert await service.get_user(full_user.id) == full_user

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_user(404)
        assert exc_info.value.details == {"entity": "User", "id": "404"}

    @pytest.mark.asyncio
    async def test_get_zero_id_is_invalid(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.get_user(0)


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_clear_location_leaves_other_fields(self, service, full_user):
        updated = await service.update_user(full_user.id, UserUpdate(location="null"))

        assert updated.location == ""
        expected = full_user.model_copy(update={"location": ""})
        assert updated == expected
        assert await service.get_user(full_user.id) == expected

    @pytest.mark.asyncio
    async def test_present_fields_overwrite(self, service, full_user):
        updated = await service.update_user(
            full_user.id,
            UserUpdate(first_name="Merdan", phone_number="+99365000000"),
        )
        assert updated.first_name == "Merdan"
        assert updated.phone_number == "+99365000000"
        assert updated.last_name == full_user.last_name

    @pytest.mark.asyncio
    async def test_clear_date_of_birth(self, service, full_user):
        updated = await service.update_user(
            full_user.id,
            UserUpdate(date_of_birth=DateOfBirth(year=0, month=0, day=0)),
        )
        assert updated.date_of_birth is None

    @pytest.mark.asyncio
    async def test_same_payload_twice_is_idempotent(self, service, full_user):
        payload = UserUpdate(gender="null", email="new@example.com")

        first = await service.update_user(full_user.id, payload)
        second = await service.update_user(full_user.id, payload)

        assert first == second

    @pytest.mark.asyncio
    async def test_accepts_prebuilt_changes(self, service, full_user):
        updated = await service.update_user(
            full_user.id, UserChanges(fields={"email": CLEAR})
        )
        assert updated.email == ""

    @pytest.mark.asyncio
    async def test_invalid_phone_does_not_touch_row(self, service, full_user):
        with pytest.raises(InvalidArgumentError):
            await service.update_user(
                full_user.id,
                UserUpdate(phone_number="+993123", first_name="Changed"),
            )
        assert await service.get_user(full_user.id) == full_user

    @pytest.mark.asyncio
    async def test_empty_payload_is_invalid(self, service, full_user):
        with pytest.raises(InvalidArgumentError):
            await service.update_user(full_user.id, UserUpdate())

    @pytest.mark.asyncio
    async def test_missing_user_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.update_user(99, UserUpdate(location="Mary"))


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_delete_then_get(self, service, full_user):
        await service.delete_user(full_user.id)
        with pytest.raises(NotFoundError):
            await service.get_user(full_user.id)

    @pytest.mark.asyncio
    async def test_delete_twice(self, service, full_user):
        await service.delete_user(full_user.id)
        with pytest.raises(NotFoundError):
            await service.delete_user(full_user.id)


class TestSetBlocked:
    @pytest.mark.asyncio
    async def test_block_then_unblock(self, service, full_user):
        await service.block_user(full_user.id)
        assert (await service.get_user(full_user.id)).blocked is True

        await service.unblock_user(full_user.id)
        assert (await service.get_user(full_user.id)).blocked is False

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found_and_writes_nothing(self, service, store, full_user):
        with pytest.raises(NotFoundError):
            await service.set_blocked(full_user.id + 1, True)
        assert len(store) == 1
        assert (await service.get_user(full_user.id)).blocked is False


class TestOutOfRangeIds:
    """Ids beyond the users.id column are missing rows, not store failures."""

    @pytest.fixture
    def db(self):
        return FakeDatabase()

    @pytest.fixture
    def pg_service(self, db):
        return UserService(UserRepository(db))

    @pytest.mark.asyncio
    async def test_get_is_not_found_without_query(self, pg_service, db):
        with pytest.raises(NotFoundError) as exc_info:
            await pg_service.get_user(3_000_000_000)

        assert exc_info.value.details == {"entity": "User", "id": "3000000000"}
        assert db.calls == []

    @pytest.mark.asyncio
    async def test_writes_are_not_found_without_query(self, pg_service, db):
        with pytest.raises(NotFoundError):
            await pg_service.update_user(3_000_000_000, UserUpdate(location="Mary"))
        with pytest.raises(NotFoundError):
            await pg_service.delete_user(3_000_000_000)
        with pytest.raises(NotFoundError):
            await pg_service.block_user(3_000_000_000)
        with pytest.raises(NotFoundError):
            await pg_service.unblock_user(MAX_USER_ID + 1)

        assert db.calls == []

    @pytest.mark.asyncio
    async def test_bad_update_payload_still_invalid(self, pg_service, db):
        with pytest.raises(InvalidArgumentError):
            await pg_service.update_user(3_000_000_000, UserUpdate(phone_number="123"))
        assert db.calls == []

    @pytest.mark.asyncio
    async def test_largest_id_reaches_store(self, pg_service, db):
        with pytest.raises(NotFoundError):
            await pg_service.get_user(MAX_USER_ID)

        assert db.calls[0][2] == (MAX_USER_ID,)


class TestStoreFailures:
    """Store errors surface once, as an opaque InternalError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc",
        [ConnectionResetError("connection lost"), asyncio.TimeoutError(), KeyError("email")],
    )
    async def test_failures_become_internal(self, exc):
        service = UserService(BrokenStore(exc))

        with pytest.raises(InternalError) as exc_info:
            await service.get_user(1)

        assert exc_info.value.message == "Internal server error"
        assert exc_info.value.__cause__ is exc

    @pytest.mark.asyncio
    async def test_every_operation_is_classified(self):
        service = UserService(BrokenStore(OSError("boom")))

        with pytest.raises(InternalError):
            await service.list_users()
        with pytest.raises(InternalError):
            await service.update_user(1, UserUpdate(location="Mary"))
        with pytest.raises(InternalError):
            await service.delete_user(1)
        with pytest.raises(InternalError):
            await service.block_user(1)

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, caplog):
        service = UserService(BrokenStore(OSError("boom")))

        with pytest.raises(InternalError):
            await service.delete_user(1)

        assert "Error deleting user" in caplog.text

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        started = asyncio.Event()

        class SlowStore(MemoryUserRepository):
            async def get_user_by_id(self, user_id):
                started.set()
                await asyncio.sleep(30)

        service = UserService(SlowStore())
        task = asyncio.create_task(service.get_user(1))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
