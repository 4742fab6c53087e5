"""Argon2id password hasher adapter."""

from __future__ import annotations

from argon2 import PasswordHasher, Type, extract_parameters
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)
from pydantic import SecretStr

from newsletter_service.application.ports.password_hasher_port import PasswordHasherPort
from newsletter_service.domain.auth.errors import InvalidCredentialsError, UnexpectedAuthError

ARGON2_MEMORY_COST_KIB = 15_000
ARGON2_TIME_COST = 2
ARGON2_PARALLELISM = 1

# Same cost parameters as freshly computed hashes; its plaintext is unknown.
DUMMY_PASSWORD_HASH = SecretStr(
    "$argon2id$v=19$m=15000,t=2,p=1$"
    "gZiV/M1gPc22ElAH/Jh1Hw$"
    "CWOrkoo7oJBQ/iyh7uJ0LO2aLEfrHwTWllSAxT0zRno"
)


class Argon2PasswordHasher(PasswordHasherPort):
    """Password hashing adapter using Argon2id PHC strings."""

    def __init__(self, *, dummy_password_hash: SecretStr = DUMMY_PASSWORD_HASH) -> None:
        self._dummy_password_hash = dummy_password_hash
        self._hasher = PasswordHasher(
            time_cost=ARGON2_TIME_COST,
            memory_cost=ARGON2_MEMORY_COST_KIB,
            parallelism=ARGON2_PARALLELISM,
            type=Type.ID,
        )

    @property
    def dummy_password_hash(self) -> SecretStr:
        return self._dummy_password_hash

    def compute_password_hash(self, password: SecretStr) -> SecretStr:
        """Hash password with a fresh random salt and return the PHC string."""

        try:
            return SecretStr(self._hasher.hash(password.get_secret_value()))
        except HashingError as exc:
            raise UnexpectedAuthError("failed to hash the password") from exc

    def verify_password_hash(
        self,
        *,
        expected_password_hash: SecretStr,
        password_candidate: SecretStr,
    ) -> None:
        """Verify candidate against expected hash.

        A hash that cannot be parsed is malformed stored data and raises
        `UnexpectedAuthError`; a mismatch raises `InvalidCredentialsError`.
        """

        encoded_hash = expected_password_hash.get_secret_value()
        try:
            extract_parameters(encoded_hash)
        except InvalidHashError as exc:
            raise UnexpectedAuthError("failed to parse hash in PHC string format") from exc

        try:
            self._hasher.verify(encoded_hash, password_candidate.get_secret_value())
        except VerifyMismatchError as exc:
            raise InvalidCredentialsError("invalid password") from exc
        except (VerificationError, InvalidHashError, UnicodeError) as exc:
            raise UnexpectedAuthError("failed to verify password hash") from exc
