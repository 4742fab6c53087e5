"""FastAPI router for admin login and password-change endpoints."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response

from newsletter_service.application.dto.auth_models import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
)
from newsletter_service.application.services.auth_service import AuthService
from newsletter_service.domain.auth.credentials import (
    Credentials,
    validate_new_password,
)
from newsletter_service.domain.auth.errors import (
    AuthError,
    InvalidCredentialsError,
    UnexpectedAuthError,
)

AUTHENTICATION_FAILED_DETAIL = "authentication failed"

logger = logging.getLogger(__name__)


def build_auth_router(*, auth_service: AuthService) -> APIRouter:
    """Build router exposing login and password-change endpoints."""

    router = APIRouter(tags=["auth"])

    @router.post("/login", response_model=LoginResponse)
    async def login(payload: LoginRequest) -> LoginResponse:
        user_id = await _authenticate(
            auth_service=auth_service,
            credentials=Credentials(
                username=payload.username.strip(),
                password=payload.password,
            ),
        )
        return LoginResponse(user_id=user_id)

    @router.post("/admin/password", status_code=204)
    async def change_password(payload: ChangePasswordRequest) -> Response:
        user_id = await _authenticate(
            auth_service=auth_service,
            credentials=Credentials(
                username=payload.username.strip(),
                password=payload.current_password,
            ),
        )

        try:
            validate_new_password(
                new_password=payload.new_password,
                new_password_check=payload.new_password_check,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            await auth_service.change_password(
                user_id=user_id,
                new_password=payload.new_password,
            )
        except UnexpectedAuthError as exc:
            logger.exception("password_change_failed user_id=%s", user_id)
            raise HTTPException(status_code=500, detail="failed to change password") from exc

        return Response(status_code=204)

    return router


async def _authenticate(
    *,
    auth_service: AuthService,
    credentials: Credentials,
) -> UUID:
    """Validate credentials and map every auth failure to one opaque 401."""

    try:
        return await auth_service.validate_credentials(credentials)
    except InvalidCredentialsError as exc:
        logger.warning("login_failed reason=invalid_credentials cause=%s", exc)
        raise HTTPException(status_code=401, detail=AUTHENTICATION_FAILED_DETAIL) from exc
    except AuthError as exc:
        logger.exception("login_failed reason=unexpected_error")
        raise HTTPException(status_code=401, detail=AUTHENTICATION_FAILED_DETAIL) from exc
