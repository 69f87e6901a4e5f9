"""
Name: Password Hasher Tests

Responsibilities:
  - Salted hashing (different digest per call)
  - verify: True on match, False on mismatch only
  - Internal failures surface as HashingError, never as a boolean
"""

from unittest.mock import patch

import pytest
from argon2 import exceptions as argon2_exceptions

from authgate.crosscutting.exceptions import HashingError

pytestmark = pytest.mark.unit


def test_hash_is_salted(hasher):
    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert "secret123" not in first
    assert first.startswith("$argon2id$")


def test_verify_matches_own_hash(hasher):
    digest = hasher.hash("secret123")

    assert hasher.verify("secret123", digest) is True


def test_verify_mismatch_returns_false(hasher):
    digest = hasher.hash("secret123")

    assert hasher.verify("wrong-password", digest) is False


def test_verify_malformed_hash_raises(hasher, logger):
    with pytest.raises(HashingError):
        hasher.verify("secret123", "not-a-real-hash")

    logger.error.assert_called_once()


def test_verify_non_string_raises(hasher):
    with pytest.raises(HashingError):
        hasher.verify(None, "$argon2id$whatever")


def test_hash_non_string_raises(hasher):
    with pytest.raises(HashingError):
        hasher.hash(b"bytes-are-not-text")


def test_hash_backend_failure_is_wrapped(hasher):
    with patch.object(
        hasher._hasher, "hash", side_effect=argon2_exceptions.HashingError("boom")
    ):
        with pytest.raises(HashingError) as exc_info:
            hasher.hash("secret123")

    assert isinstance(exc_info.value.original_error, argon2_exceptions.HashingError)


def test_verify_non_ascii_hash_raises(hasher):
    with pytest.raises(HashingError) as exc_info:
        hasher.verify("secret123", "$argon2id$ñ")

    assert isinstance(exc_info.value.original_error, UnicodeError)


@pytest.mark.parametrize("operation", ["hash", "verify"])
def test_lone_surrogate_plaintext_raises(hasher, operation):
    stored = hasher.hash("secret123")

    with pytest.raises(HashingError):
        if operation == "hash":
            hasher.hash("\ud800abc")
        else:
            hasher.verify("\ud800abc", stored)
