"""Schemas for platform auth requests and the local session API."""

from .auth import (
    ApiEnvelope,
    ApiErrorBody,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SessionStatus,
    SocialLoginRequest,
    TwoFactorRequest,
    UpdateProfileRequest,
    VerifyEmailRequest,
)

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
