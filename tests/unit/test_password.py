"""Tests for password hashing and the strength policy."""

import pytest

from rolegate.infrastructure.security.password import (
    get_dummy_hash,
    get_password_hash,
    validate_password_strength,
    verify_password,
)


def test_hash_and_verify() -> None:
    hashed = get_password_hash("Str0ng@Pass", rounds=4)
    assert hashed != "Str0ng@Pass"
    assert verify_password("Str0ng@Pass", hashed)
    assert not verify_password("Str0ng@Pasx", hashed)


def test_hash_is_salted() -> None:
    assert get_password_hash("Str0ng@Pass", rounds=4) != get_password_hash(
        "Str0ng@Pass", rounds=4
    )


def test_long_passwords_are_not_truncated() -> None:
    base = "A1@a" * 20
    hashed = get_password_hash(base + "x", rounds=4)
    assert not verify_password(base + "y", hashed)


def test_verify_against_garbage_hash_is_false() -> None:
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_strong_password_has_no_errors() -> None:
    assert validate_password_strength("Str0ng@Pass") == []


def test_every_violated_rule_is_reported() -> None:
    errors = validate_password_strength("abc")
    assert errors == [
        "Password must be at least 8 characters long",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
        "Password must contain at least one special character",
    ]


@pytest.mark.parametrize(
    ("password", "message"),
    [
        ("STR0NG@PASS", "Password must contain at least one lowercase letter"),
        ("str0ng@pass", "Password must contain at least one uppercase letter"),
        ("Strong@Pass", "Password must contain at least one number"),
        ("Str0ngPass1", "Password must contain at least one special character"),
    ],
)
def test_single_rule(password: str, message: str) -> None:
    assert validate_password_strength(password) == [message]


async def test_dummy_hash_is_cached_and_valid() -> None:
    first = await get_dummy_hash()
    assert first == await get_dummy_hash()
    assert not verify_password("whatever", first)
