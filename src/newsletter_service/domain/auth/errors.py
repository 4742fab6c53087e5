"""Authentication error taxonomy shared by the credential verifier and its adapters."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for credential verification failures."""


class InvalidCredentialsError(AuthError):
    """Raised for an unknown username or a wrong password.

    Both cases are indistinguishable to callers. The chained cause is kept
    for diagnostics only.
    """


class UnexpectedAuthError(AuthError):
    """Raised when infrastructure fails while verifying or storing credentials."""
