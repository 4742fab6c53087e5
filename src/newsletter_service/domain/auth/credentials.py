"""Credential value objects and normalization helpers for admin login inputs."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import SecretStr

MIN_PASSWORD_LENGTH = 12
MAX_PASSWORD_LENGTH = 128


@dataclass(frozen=True)
class Credentials:
    """Username/password pair for one authentication attempt."""

    username: str
    password: SecretStr


def normalize_username(*, username: str) -> str:
    """Normalize one username and reject blank values."""

    normalized = username.strip()
    if not normalized:
        raise ValueError("username cannot be blank")
    return normalized


def normalize_user_password(*, password: str) -> str:
    """Normalize one plaintext password and reject blank values."""

    normalized = password.strip()
    if not normalized:
        raise ValueError("password cannot be blank")
    return normalized


def validate_new_password(*, new_password: SecretStr, new_password_check: SecretStr) -> None:
    """Reject a new password that does not match its confirmation or has a bad length."""

    candidate = new_password.get_secret_value()
    if candidate != new_password_check.get_secret_value():
        raise ValueError("you entered two different new passwords")
    if len(candidate) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"the new password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(candidate) > MAX_PASSWORD_LENGTH:
        raise ValueError(
            f"the new password must be at most {MAX_PASSWORD_LENGTH} characters long"
        )
