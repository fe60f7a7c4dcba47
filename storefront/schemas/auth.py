"""Request and response schemas exchanged with the platform auth endpoints."""

from __future__ import annotations

from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.auth import UserPreferences

T = TypeVar("T")


class ApiErrorBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = "An unexpected error occurred"
    code: str = "UNKNOWN_ERROR"
    details: Any = None


class ApiEnvelope(BaseModel, Generic[T]):
    """Standard platform response wrapper."""

    model_config = ConfigDict(extra="allow")

    status: Optional[int] = None
    success: bool = False
    data: Optional[T] = None
    error: Optional[ApiErrorBody] = None

    @property
    def error_message(self) -> str:
        if self.error is not None:
            return self.error.message
        return "The platform reported an unsuccessful operation."


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    phone: Optional[str] = None


class SocialLoginRequest(BaseModel):
    provider: Literal["google", "facebook", "twitter", "apple"]
    access_token: str
    id_token: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: str
    email: str
    password: str
    password_confirmation: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    new_password_confirmation: str


class VerifyEmailRequest(BaseModel):
    token: str
    email: Optional[str] = None


class TwoFactorRequest(BaseModel):
    code: str
    recovery_code: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    preferences: Optional[UserPreferences] = None


class SessionStatus(BaseModel):
    """Snapshot of the local session returned by the HTTP surface."""

    authenticated: bool
    expires_at: Optional[str] = Field(None, description="ISO-8601 UTC expiry.")
    user_id: Optional[str] = None


__all__ = [
    "ApiEnvelope",
    "ApiErrorBody",
    "ChangePasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SessionStatus",
    "SocialLoginRequest",
    "TwoFactorRequest",
    "UpdateProfileRequest",
    "VerifyEmailRequest",
]
