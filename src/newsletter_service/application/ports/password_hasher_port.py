"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol

from pydantic import SecretStr


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract.

    Both operations are synchronous and CPU-bound. Callers on the event loop
    must run them through a blocking task runner.
    """

    @property
    def dummy_password_hash(self) -> SecretStr:
        """Valid hash with no known plaintext, verified when a username is unknown."""

    def compute_password_hash(self, password: SecretStr) -> SecretStr:
        """Hash plaintext password for storage."""

    def verify_password_hash(
        self,
        *,
        expected_password_hash: SecretStr,
        password_candidate: SecretStr,
    ) -> None:
        """Verify candidate against stored hash, raising an auth error on failure."""
