"""SQLAlchemy adapter for credential lookup and password-hash updates."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from pydantic import SecretStr
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsletter_service.application.ports.credential_store_port import (
    CredentialStoreError,
    CredentialStorePort,
    StoredCredentials,
)
from newsletter_service.infrastructure.db.metadata import users


class SqlAlchemyCredentialStore(CredentialStorePort):
    """Credential store backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_username(self, *, username: str) -> StoredCredentials | None:
        """Return stored credentials for username or None."""

        statement = sa.select(
            users.c.user_id,
            users.c.password_hash,
        ).where(users.c.username == username).limit(1)

        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
        except SQLAlchemyError as exc:
            raise CredentialStoreError(
                "failed to perform a query to retrieve stored credentials"
            ) from exc

        row = result.mappings().first()
        if row is None:
            return None
        return _to_stored_credentials(row)

    async def update_password_hash(self, *, user_id: UUID, password_hash: SecretStr) -> None:
        """Overwrite the stored password hash for one user."""

        statement = (
            sa.update(users)
            .where(users.c.user_id == user_id)
            .values(
                password_hash=password_hash.get_secret_value(),
                updated_at=datetime.now(tz=UTC),
            )
        )

        try:
            async with self._session_factory() as session:
                await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as exc:
            raise CredentialStoreError(
                "failed to update the password in the database"
            ) from exc

    async def create_user(self, *, username: str, password_hash: SecretStr) -> UUID:
        """Insert one user row and return its generated id."""

        user_id = uuid4()
        statement = sa.insert(users).values(
            user_id=user_id,
            username=username,
            password_hash=password_hash.get_secret_value(),
        )

        try:
            async with self._session_factory() as session:
                await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as exc:
            raise CredentialStoreError("failed to insert user") from exc
        return user_id


def _to_stored_credentials(row: sa.RowMapping) -> StoredCredentials:
    raw_user_id = row["user_id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return StoredCredentials(
        user_id=user_id,
        password_hash=SecretStr(cast(str, row["password_hash"])),
    )
