"""Pydantic models for admin login and password-change contracts."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class LoginRequest(StrictModel):
    """HTTP request model for admin login."""

    username: str = Field(min_length=1)
    password: SecretStr


class LoginResponse(StrictModel):
    """HTTP response model for a successful admin login."""

    user_id: UUID


class ChangePasswordRequest(StrictModel):
    """HTTP request model for changing the caller's own password."""

    username: str = Field(min_length=1)
    current_password: SecretStr
    new_password: SecretStr
    new_password_check: SecretStr
