"""Tests for the PostgreSQL repository and the Database handle."""

import pytest

from useradmin.database import Database, affected_rows, check_connection
from useradmin.db.repositories.user_repo import UserRepository
from useradmin.db.statements import USER_COLUMNS, build_user_update
from useradmin.models.user import UserCreate, UserUpdate

from tests.fakes import FakeDatabase, FakePool

PROJECTION = ", ".join(USER_COLUMNS)


class TestAffectedRows:
    @pytest.mark.parametrize(
        "status,expected",
        [("UPDATE 1", 1), ("DELETE 0", 0), ("INSERT 0 1", 1), ("UPDATE 12", 12)],
    )
    def test_parses_command_tag(self, status, expected):
        assert affected_rows(status) == expected

    def test_malformed_tag_raises(self):
        with pytest.raises(ValueError):
            affected_rows("LISTEN")


class TestDatabase:
    @pytest.mark.asyncio
    async def test_execute_returns_count_and_passes_deadline(self):
        pool = FakePool(result="DELETE 1")
        db = Database(pool, timeout=2.5)

        count = await db.execute("DELETE FROM users WHERE id = $1", 4)

        assert count == 1
        assert pool.calls == [("execute", "DELETE FROM users WHERE id = $1", (4,), 2.5)]

    @pytest.mark.asyncio
    async def test_per_call_timeout_overrides_default(self):
        pool = FakePool(result=[])
        db = Database(pool, timeout=2.5)

        await db.fetch("SELECT 1", timeout=0.5)

        assert pool.calls[0][3] == 0.5

    @pytest.mark.asyncio
    async def test_health_check(self):
        assert await check_connection(Database(FakePool(result={"ok": 1}))) is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        class DeadPool(FakePool):
            async def fetchrow(self, query, *args, timeout=None):
                raise ConnectionRefusedError("no route")

        assert await check_connection(Database(DeadPool())) is False


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_create_uses_insert_returning(self):
        db = FakeDatabase(result={"id": 1})
        repo = UserRepository(db)
        values = UserCreate(phone_number="+99312345678", first_name="Aman").to_values()

        await repo.create_user(values)

        method, sql, args = db.calls[0]
        assert method == "fetchrow"
        assert sql.startswith(
            "INSERT INTO users (first_name, last_name, phone_number, blocked, gender, "
            "date_of_birth, location, email, profile_photo_url) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)"
        )
        assert sql.endswith("RETURNING " + PROJECTION)
        assert args == ("Aman", None, "+99312345678", False, None, None, None, None, None)

    @pytest.mark.asyncio
    async def test_get_by_id(self):
        db = FakeDatabase()
        await UserRepository(db).get_user_by_id(9)
        assert db.calls == [
            ("fetchrow", f"SELECT {PROJECTION} FROM users WHERE id = $1", (9,))
        ]

    @pytest.mark.asyncio
    async def test_list_is_keyset(self):
        db = FakeDatabase(result=[])
        await UserRepository(db).list_users(after_id=20, limit=10)
        assert db.calls == [
            (
                "fetch",
                f"SELECT {PROJECTION} FROM users WHERE id > $1 ORDER BY id LIMIT $2",
                (20, 10),
            )
        ]

    @pytest.mark.asyncio
    async def test_update_executes_plan(self):
        db = FakeDatabase()
        plan = build_user_update(5, UserUpdate(location="null").to_changes())

        await UserRepository(db).update_user(plan)

        statement = plan.to_statement()
        assert db.calls == [("fetchrow", statement.sql, statement.args)]

    @pytest.mark.asyncio
    async def test_delete_and_block_return_counts(self):
        db = FakeDatabase(result=0)
        repo = UserRepository(db)

        assert await repo.delete_user(3) == 0
        assert await repo.set_blocked(3, True) == 0
        assert db.calls == [
            ("execute", "DELETE FROM users WHERE id = $1", (3,)),
            ("execute", "UPDATE users SET blocked = $1 WHERE id = $2", (True, 3)),
        ]
