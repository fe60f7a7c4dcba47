"""Exception hierarchy shared by the transport, token and session layers."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional


class StorefrontError(Exception):
    """Base class for failures raised by the session bridge."""


class PlatformTransportError(StorefrontError):
    """Raised when a platform call fails at the HTTP or network level."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: str = "UNKNOWN_ERROR",
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == HTTPStatus.UNAUTHORIZED

    @property
    def is_transient(self) -> bool:
        """Network failures and 5xx responses may succeed if retried later."""
        return self.status_code is None or self.status_code >= 500

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code!r}, "
            f"code={self.code!r}, message={self.message!r})"
        )


class RefreshTokenMissingError(StorefrontError):
    """Raised when a refresh is requested without a stored refresh token."""


class TokenRefreshError(StorefrontError):
    """Raised to every waiter when a token refresh attempt fails.

    ``rejected`` is true when the platform refused the refresh token, in which
    case the stored session has already been cleared.
    """

    def __init__(self, message: str, *, rejected: bool) -> None:
        super().__init__(message)
        self.rejected = rejected


class AuthenticationError(StorefrontError):
    """Raised when a login-style response does not carry usable credentials."""


class PlatformOperationError(StorefrontError):
    """Raised when the platform answers ``success: false`` on a 2xx response."""

    def __init__(self, message: str, *, code: str = "OPERATION_FAILED", envelope: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.envelope = envelope


__all__ = [
    "AuthenticationError",
    "PlatformOperationError",
    "PlatformTransportError",
    "RefreshTokenMissingError",
    "StorefrontError",
    "TokenRefreshError",
]
