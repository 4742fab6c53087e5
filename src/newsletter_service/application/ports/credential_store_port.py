"""Port for credential lookup and password-hash persistence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import SecretStr


class CredentialStoreError(RuntimeError):
    """Raised when the credential store cannot complete a query."""


@dataclass(frozen=True)
class StoredCredentials:
    """Persisted credential state for one username."""

    user_id: UUID
    password_hash: SecretStr


class CredentialStorePort(Protocol):
    """Credential store contract."""

    async def find_by_username(self, *, username: str) -> StoredCredentials | None:
        """Return stored credentials for username or None."""

    async def update_password_hash(self, *, user_id: UUID, password_hash: SecretStr) -> None:
        """Overwrite the stored password hash for one user."""
