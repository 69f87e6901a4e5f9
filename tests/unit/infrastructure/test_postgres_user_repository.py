"""
Unit tests for PostgresUserRepository (pool mocked, no real database).
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg import errors as pg_errors

from authgate.crosscutting.exceptions import EmailAlreadyRegisteredError, StoreError
from authgate.identity.users import UserRole
from authgate.infrastructure.repositories import PostgresUserRepository

pytestmark = pytest.mark.unit


def _row(user_id=None, roles=("user",), email="a@b.com"):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return (
        user_id or uuid4(),
        email,
        "Ada",
        None,
        "hash",
        True,
        list(roles),
        "t1",
        None,
        None,
        now,
        now,
    )


@pytest.fixture
def conn() -> MagicMock:
    return MagicMock()


@pytest.fixture
def repository(conn, logger) -> PostgresUserRepository:
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return PostgresUserRepository(pool, logger)


def test_find_by_email_maps_row(repository, conn):
    conn.execute.return_value.fetchone.return_value = _row(roles=["admin", "user"])

    user = repository.find_by_email("a@b.com")

    assert user.email == "a@b.com"
    assert user.last_name == ""
    assert user.roles == (UserRole.ADMIN, UserRole.USER)
    query, params = conn.execute.call_args.args
    assert "WHERE email = %s" in query
    assert params == ("a@b.com",)


def test_find_by_id_missing_returns_none(repository, conn):
    conn.execute.return_value.fetchone.return_value = None

    assert repository.find_by_id(uuid4()) is None


def test_unknown_role_in_row_is_store_error(repository, conn):
    conn.execute.return_value.fetchone.return_value = _row(roles=["root"])

    with pytest.raises(StoreError):
        repository.find_by_email("a@b.com")


def test_create_inserts_whitelisted_columns(repository, conn):
    conn.execute.return_value.fetchone.return_value = _row()

    repository.create(
        {"email": "a@b.com", "password_hash": "hash", "roles": (UserRole.MANAGER,)}
    )

    query, params = conn.execute.call_args.args
    assert "INSERT INTO users (id, email, password_hash, roles)" in query
    assert params[1:] == ("a@b.com", "hash", ["manager"])


def test_create_rejects_unknown_columns(repository, conn):
    with pytest.raises(StoreError):
        repository.create({"email": "a@b.com", "password_hash": "h", "is_admin": 1})
    conn.execute.assert_not_called()


def test_unique_violation_maps_to_email_registered(repository, conn):
    conn.execute.side_effect = pg_errors.UniqueViolation("duplicate key")

    with pytest.raises(EmailAlreadyRegisteredError):
        repository.create({"email": "a@b.com", "password_hash": "hash"})


def test_driver_errors_map_to_store_error(repository, conn, logger):
    conn.execute.side_effect = pg_errors.OperationalError("connection refused")

    with pytest.raises(StoreError):
        repository.find_by_email("a@b.com")
    logger.exception.assert_called_once()


def test_update_sets_updated_at_and_only_given_columns(repository, conn):
    user_id = uuid4()
    conn.execute.return_value.fetchone.return_value = _row(user_id=user_id)

    repository.update(user_id, {"first_name": "Ada"})

    query, params = conn.execute.call_args.args
    assert "SET first_name = %s, updated_at = now()" in query
    assert "password_hash" not in query.split("RETURNING")[0]
    assert params == ("Ada", user_id)


def test_update_without_columns_reads_current(repository, conn):
    user_id = uuid4()
    conn.execute.return_value.fetchone.return_value = _row(user_id=user_id)

    user = repository.update(user_id, {})

    assert user.id == user_id
    assert "SELECT" in conn.execute.call_args.args[0]


def test_delete_returns_rowcount_as_bool(repository, conn):
    conn.execute.return_value.rowcount = 1
    assert repository.delete(uuid4()) is True

    conn.execute.return_value.rowcount = 0
    assert repository.delete(uuid4()) is False


def test_list_users_passes_pagination(repository, conn):
    conn.execute.return_value.fetchall.return_value = [_row(), _row(email="o@b.com")]

    users = repository.list_users(limit=10, offset=5)

    assert len(users) == 2
    assert conn.execute.call_args.args[1] == (10, 5)
    assert repository.list_users(limit=0) == []
