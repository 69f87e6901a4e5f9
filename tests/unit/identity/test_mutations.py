"""
Name: User Mutation Builder Tests

Responsibilities:
  - Create hashes the password exactly once and applies defaults
  - Update never rehashes unless a new password is part of the mutation
"""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from authgate.identity.mutations import (
    build_user_create,
    build_user_update,
    validate_password,
)
from authgate.identity.users import User, UserRole

pytestmark = pytest.mark.unit


@pytest.fixture
def spy_hasher() -> Mock:
    hasher = Mock()
    hasher.hash.side_effect = lambda plaintext: f"hashed::{plaintext}"
    return hasher


def _user(**overrides) -> User:
    data = {
        "id": uuid4(),
        "email": "a@b.com",
        "password_hash": "stored-hash",
        "first_name": "Ada",
        "is_active": True,
    }
    data.update(overrides)
    return User(**data)


def test_create_hashes_once_and_applies_defaults(spy_hasher):
    fields = build_user_create(
        {"email": "  A@B.com ", "password": "secret123"}, spy_hasher
    )

    spy_hasher.hash.assert_called_once_with("secret123")
    assert fields["password_hash"] == "hashed::secret123"
    assert "password" not in fields
    assert fields["email"] == "a@b.com"
    assert fields["is_active"] is False
    assert fields["roles"] == (UserRole.USER,)


def test_create_ignores_incoming_password_hash(spy_hasher):
    fields = build_user_create(
        {"email": "a@b.com", "password": "pw", "password_hash": "evil"}, spy_hasher
    )

    assert fields["password_hash"] == "hashed::pw"


@pytest.mark.parametrize("password", [None, "", 123])
def test_create_requires_password(spy_hasher, password):
    with pytest.raises(ValueError):
        build_user_create({"email": "a@b.com", "password": password}, spy_hasher)
    spy_hasher.hash.assert_not_called()


def test_create_requires_email(spy_hasher):
    with pytest.raises(ValueError):
        build_user_create({"password": "pw"}, spy_hasher)


def test_update_without_password_never_rehashes(spy_hasher):
    fields = build_user_update(_user(), {"first_name": "Grace"}, spy_hasher)

    assert fields == {"first_name": "Grace"}
    spy_hasher.hash.assert_not_called()


def test_update_with_none_password_never_rehashes(spy_hasher):
    fields = build_user_update(_user(), {"password": None}, spy_hasher)

    assert fields == {}
    spy_hasher.hash.assert_not_called()


def test_update_with_password_hashes_once(spy_hasher):
    fields = build_user_update(_user(), {"password": "new-secret"}, spy_hasher)

    spy_hasher.hash.assert_called_once_with("new-secret")
    assert fields == {"password_hash": "hashed::new-secret"}


def test_update_skips_null_for_not_null_columns(spy_hasher):
    user = _user(roles=(UserRole.MANAGER,))

    fields = build_user_update(
        user,
        {"first_name": None, "is_active": None, "roles": None, "email": None},
        spy_hasher,
    )

    assert fields == {}


def test_update_null_tenant_unassigns(spy_hasher):
    user = _user(tenant_id="t1")

    fields = build_user_update(user, {"tenant_id": None}, spy_hasher)

    assert fields == {"tenant_id": None}


def test_update_keeps_only_changed_columns(spy_hasher):
    user = _user(roles=(UserRole.USER,))

    fields = build_user_update(
        user,
        {"first_name": "Ada", "email": "NEW@b.com", "roles": ["user", "manager"]},
        spy_hasher,
    )

    assert fields == {
        "email": "new@b.com",
        "roles": (UserRole.USER, UserRole.MANAGER),
    }


def test_validate_password_delegates_to_verify(hasher):
    user = _user(password_hash=hasher.hash("secret123"))

    assert validate_password(user, "secret123", hasher) is True
    assert validate_password(user, "nope", hasher) is False
