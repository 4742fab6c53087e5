from __future__ import annotations

from pathlib import Path
from uuid import UUID, uuid4

import pytest
import sqlalchemy as sa
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import create_async_engine

from newsletter_service.application.ports.credential_store_port import CredentialStoreError
from newsletter_service.infrastructure.db.credential_store import SqlAlchemyCredentialStore
from newsletter_service.infrastructure.db.metadata import metadata
from newsletter_service.infrastructure.db.session import create_schema, create_session_factory


def _create_database(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"
    metadata.create_all(sa.create_engine(sync_url))
    return sync_url, async_url


def _insert_user(
    connection: sa.Connection,
    *,
    user_id: UUID,
    username: str,
    password_hash: str,
) -> None:
    connection.execute(
        sa.text(
            "INSERT INTO users (user_id, username, password_hash) "
            "VALUES (:user_id, :username, :password_hash)"
        ),
        {"user_id": user_id.hex, "username": username, "password_hash": password_hash},
    )


@pytest.mark.asyncio
async def test_find_by_username_returns_stored_credentials(tmp_path: Path) -> None:
    sync_url, async_url = _create_database(tmp_path, "store_find.db")
    store = SqlAlchemyCredentialStore(create_session_factory(async_url))
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id, username="alice", password_hash="hash-a")

    found = await store.find_by_username(username="alice")
    missing = await store.find_by_username(username="bob")

    assert found is not None
    assert found.user_id == user_id
    assert found.password_hash.get_secret_value() == "hash-a"
    assert missing is None


@pytest.mark.asyncio
async def test_update_password_hash_overwrites_only_target_user(tmp_path: Path) -> None:
    sync_url, async_url = _create_database(tmp_path, "store_update.db")
    store = SqlAlchemyCredentialStore(create_session_factory(async_url))
    alice_id = uuid4()
    carol_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=alice_id, username="alice", password_hash="hash-a")
        _insert_user(connection, user_id=carol_id, username="carol", password_hash="hash-c")

    await store.update_password_hash(user_id=alice_id, password_hash=SecretStr("hash-new"))

    with sa.create_engine(sync_url).begin() as connection:
        rows = connection.execute(
            sa.text("SELECT username, password_hash FROM users ORDER BY username")
        ).mappings().all()

    assert [(row["username"], row["password_hash"]) for row in rows] == [
        ("alice", "hash-new"),
        ("carol", "hash-c"),
    ]


@pytest.mark.asyncio
async def test_create_user_persists_row_and_rejects_duplicate_username(tmp_path: Path) -> None:
    _, async_url = _create_database(tmp_path, "store_create.db")
    store = SqlAlchemyCredentialStore(create_session_factory(async_url))

    user_id = await store.create_user(username="alice", password_hash=SecretStr("hash-a"))
    found = await store.find_by_username(username="alice")

    assert found is not None
    assert found.user_id == user_id
    with pytest.raises(CredentialStoreError):
        await store.create_user(username="alice", password_hash=SecretStr("hash-b"))


@pytest.mark.asyncio
async def test_missing_schema_surfaces_as_credential_store_error(tmp_path: Path) -> None:
    async_url = f"sqlite+aiosqlite:///{tmp_path / 'store_no_schema.db'}"
    store = SqlAlchemyCredentialStore(create_session_factory(async_url))

    with pytest.raises(CredentialStoreError):
        await store.find_by_username(username="alice")
    with pytest.raises(CredentialStoreError):
        await store.update_password_hash(user_id=uuid4(), password_hash=SecretStr("hash"))


@pytest.mark.asyncio
async def test_create_schema_is_idempotent(tmp_path: Path) -> None:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")
    try:
        await create_schema(engine)
        await create_schema(engine)
    finally:
        await engine.dispose()
