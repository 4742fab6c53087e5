"""api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import uvicorn
from fastapi import FastAPI, Response
from sqlalchemy.ext.asyncio import create_async_engine

from newsletter_service.application.services.auth_service import AuthService
from newsletter_service.config.settings import Settings, load_settings
from newsletter_service.infrastructure.concurrency.blocking_task_runner import (
    ThreadPoolBlockingTaskRunner,
)
from newsletter_service.infrastructure.db.admin_bootstrap import (
    ensure_initial_admin_user,
    resolve_admin_bootstrap_config,
)
from newsletter_service.infrastructure.db.credential_store import SqlAlchemyCredentialStore
from newsletter_service.infrastructure.db.session import bind_session_factory, create_schema
from newsletter_service.infrastructure.http.auth_router import build_auth_router
from newsletter_service.infrastructure.http.request_id import request_id_middleware
from newsletter_service.infrastructure.logging import configure_logging
from newsletter_service.infrastructure.security.password_hasher import Argon2PasswordHasher

API_HOST = "0.0.0.0"
API_PORT = 8000
logger = logging.getLogger(__name__)


def create_app(
    *,
    auth_service: AuthService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI app for admin login and password-change routes.

    An injected `auth_service` is used as-is; otherwise the runtime
    dependencies are built from settings and started in the app lifespan.
    """

    if auth_service is not None:
        return _build_app(auth_service=auth_service)

    if settings is None:
        settings = load_settings()
    configure_logging(level=settings.log_level)

    bootstrap_config = resolve_admin_bootstrap_config(
        username=settings.bootstrap_admin_username,
        password=settings.bootstrap_admin_password,
        password_file=settings.bootstrap_admin_password_file,
    )
    engine = create_async_engine(settings.database_url)
    session_factory = bind_session_factory(engine)
    password_hasher = Argon2PasswordHasher()
    blocking_runner = ThreadPoolBlockingTaskRunner(max_workers=settings.password_hash_workers)
    runtime_auth_service = AuthService(
        credential_store=SqlAlchemyCredentialStore(session_factory),
        password_hasher=password_hasher,
        blocking_runner=blocking_runner,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await create_schema(engine)
        if bootstrap_config is not None:
            result = await ensure_initial_admin_user(
                session_factory=session_factory,
                password_hasher=password_hasher,
                blocking_runner=blocking_runner,
                config=bootstrap_config,
            )
            logger.info(
                "admin_bootstrap_result username=%s outcome=%s",
                result.username,
                result.outcome.value,
            )
        try:
            yield
        finally:
            blocking_runner.close()
            await engine.dispose()

    return _build_app(auth_service=runtime_auth_service, lifespan=lifespan)


def _build_app(
    *,
    auth_service: AuthService,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    app = FastAPI(lifespan=lifespan)
    app.middleware("http")(request_id_middleware)
    app.include_router(build_auth_router(auth_service=auth_service))

    @app.get("/health_check")
    async def health_check() -> Response:
        return Response(status_code=200)

    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
