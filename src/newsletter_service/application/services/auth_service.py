"""Application authentication service for credential verification and password change."""

from __future__ import annotations

import logging
from uuid import UUID

from pydantic import SecretStr

from newsletter_service.application.ports.blocking_task_runner_port import (
    BlockingTaskRunnerPort,
)
from newsletter_service.application.ports.credential_store_port import (
    CredentialStoreError,
    CredentialStorePort,
)
from newsletter_service.application.ports.password_hasher_port import PasswordHasherPort
from newsletter_service.domain.auth.credentials import Credentials
from newsletter_service.domain.auth.errors import (
    AuthError,
    InvalidCredentialsError,
    UnexpectedAuthError,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Validate admin credentials and persist new password hashes."""

    def __init__(
        self,
        *,
        credential_store: CredentialStorePort,
        password_hasher: PasswordHasherPort,
        blocking_runner: BlockingTaskRunnerPort,
    ) -> None:
        self._credential_store = credential_store
        self._password_hasher = password_hasher
        self._blocking_runner = blocking_runner

    async def validate_credentials(self, credentials: Credentials) -> UUID:
        """Return the user id for valid credentials.

        Verification always runs, against the dummy hash when the username is
        unknown, so response time does not reveal whether a username exists.
        """

        user_id: UUID | None = None
        expected_password_hash = self._password_hasher.dummy_password_hash

        try:
            stored = await self._credential_store.find_by_username(
                username=credentials.username
            )
        except CredentialStoreError as exc:
            raise UnexpectedAuthError("failed to retrieve stored credentials") from exc

        if stored is not None:
            user_id = stored.user_id
            expected_password_hash = stored.password_hash

        try:
            await self._blocking_runner.run(
                self._password_hasher.verify_password_hash,
                expected_password_hash=expected_password_hash,
                password_candidate=credentials.password,
            )
        except AuthError:
            raise
        except Exception as exc:
            raise UnexpectedAuthError("failed to run password verification") from exc

        # Only a stored record sets user_id, so a dummy-hash match never authenticates.
        if user_id is None:
            raise InvalidCredentialsError("unknown username")

        logger.info("credentials_validated user_id=%s", user_id)
        return user_id

    async def change_password(self, *, user_id: UUID, new_password: SecretStr) -> None:
        """Hash new password and overwrite the stored hash for user_id."""

        try:
            password_hash = await self._blocking_runner.run(
                self._password_hasher.compute_password_hash,
                new_password,
            )
        except UnexpectedAuthError:
            raise
        except Exception as exc:
            raise UnexpectedAuthError("failed to hash the password") from exc

        try:
            await self._credential_store.update_password_hash(
                user_id=user_id,
                password_hash=password_hash,
            )
        except CredentialStoreError as exc:
            raise UnexpectedAuthError("failed to update the stored password hash") from exc

        logger.info("password_changed user_id=%s", user_id)
