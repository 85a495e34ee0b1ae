"""
Name: Password Hashing and Policy Tests
"""

import pytest

from techmart.identity.passwords import PasswordPolicy, hash_password, verify_password

pytestmark = pytest.mark.unit


def test_hash_is_salted_and_verifiable():
    first = hash_password("Secret123")
    second = hash_password("Secret123")

    assert first != second
    assert first != "Secret123"
    assert verify_password("Secret123", first)
    assert not verify_password("secret123", first)


def test_verify_with_corrupted_hash_returns_false():
    assert verify_password("Secret123", "not-an-argon2-hash") is False


def test_policy_accepts_strong_password():
    assert PasswordPolicy().validate("Secret123") == []


def test_policy_reports_every_violation():
    errors = PasswordPolicy().validate("abc")

    assert errors == [
        "Password must be at least 8 characters.",
        "Password must contain at least one digit.",
        "Password must contain at least one uppercase letter.",
    ]


def test_policy_handles_missing_password():
    errors = PasswordPolicy(min_length=4).validate(None)

    assert "Password must be at least 4 characters." in errors
    assert len(errors) == 4


def test_policy_flags_can_be_relaxed():
    policy = PasswordPolicy(
        min_length=3, require_digit=False, require_uppercase=False
    )

    assert policy.validate("abc") == []
