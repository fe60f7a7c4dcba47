"""
Session-level operations against the platform auth and user endpoints.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from storefront.core.errors import (
    AuthenticationError,
    PlatformOperationError,
    RefreshTokenMissingError,
    StorefrontError,
    TokenRefreshError,
)
from storefront.models.auth import AuthTokens, UserProfile
from storefront.schemas.auth import (
    ApiEnvelope,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SocialLoginRequest,
    TwoFactorRequest,
    UpdateProfileRequest,
    VerifyEmailRequest,
)
from storefront.services.request_executor import ResilientRequestExecutor
from storefront.services.token_refresh import RefreshCoordinator
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class AuthEndpoints:
    LOGIN = "/auth/login"
    REGISTER = "/auth/register"
    SOCIAL_LOGIN = "/auth/social"
    LOGOUT = "/auth/logout"
    FORGOT_PASSWORD = "/auth/password/forgot"
    RESET_PASSWORD = "/auth/password/reset"
    CHANGE_PASSWORD = "/auth/password/change"
    VERIFY_EMAIL = "/auth/email/verify"
    RESEND_VERIFICATION = "/auth/email/resend"
    ENABLE_2FA = "/auth/2fa/enable"
    DISABLE_2FA = "/auth/2fa/disable"
    VERIFY_2FA = "/auth/2fa/verify"
    PROFILE = "/user/profile"
    DELETE_ACCOUNT = "/user/account"


def _body(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(exclude_none=True)


class AuthSessionService:
    """Public session surface built on the resilient executor and token store."""

    def __init__(
        self,
        executor: ResilientRequestExecutor,
        token_store: TokenStore,
        refresher: RefreshCoordinator,
    ) -> None:
        self._executor = executor
        self._tokens = token_store
        self._refresher = refresher

    # Session state

    def load(self) -> bool:
        """Adopt the persisted session, if any. Call once at start-up."""
        adopted = self._tokens.load()
        logger.info(
            "Session store loaded",
            extra={"authenticated": adopted},
        )
        return adopted

    def is_authenticated(self) -> bool:
        return self._tokens.is_authenticated()

    @property
    def tokens(self) -> Optional[AuthTokens]:
        return self._tokens.tokens

    def cached_profile(self) -> Optional[UserProfile]:
        return self._tokens.cached_profile()

    # Sign-in family

    async def login(self, credentials: LoginRequest) -> ApiEnvelope[Dict[str, Any]]:
        return await self._sign_in(AuthEndpoints.LOGIN, _body(credentials))

    async def register(self, user: RegisterRequest) -> ApiEnvelope[Dict[str, Any]]:
        return await self._sign_in(AuthEndpoints.REGISTER, _body(user))

    async def social_login(self, social: SocialLoginRequest) -> ApiEnvelope[Dict[str, Any]]:
        return await self._sign_in(AuthEndpoints.SOCIAL_LOGIN, _body(social))

    async def _sign_in(self, path: str, payload: Dict[str, Any]) -> ApiEnvelope[Dict[str, Any]]:
        # A rejected sign-in must not disturb an existing session via refresh.
        body = await self._executor.call("POST", path, payload, recover=False)
        envelope = self._require_success(body)
        data = envelope.data
        if not isinstance(data, dict):
            raise AuthenticationError("Sign-in response did not include session data.")

        try:
            tokens = AuthTokens.from_grant(data, issued_at=self._tokens.now())
        except ValueError as exc:
            raise AuthenticationError(str(exc)) from exc

        profile = None
        user = data.get("user")
        if user:
            if not isinstance(user, dict):
                raise AuthenticationError("Sign-in response carried an invalid user.")
            try:
                profile = UserProfile.from_payload(user)
            except ValidationError as exc:
                raise AuthenticationError("Sign-in response carried an invalid user.") from exc

        self._tokens.save(tokens)
        if profile is not None:
            self._tokens.save_profile(profile)
        logger.info(
            "Session established",
            extra={"path": path, "expires_at": tokens.expires_at.isoformat()},
        )
        return envelope

    async def logout(self) -> ApiEnvelope[Any]:
        """End the session remotely; local state is cleared regardless."""
        try:
            body = await self._executor.call(
                "POST", AuthEndpoints.LOGOUT, {}, recover=False
            )
        finally:
            self._tokens.clear()
            logger.info("Session cleared by logout")
        return self._envelope(body)

    # Password, email and two-factor flows

    async def request_password_reset(self, email: str) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.FORGOT_PASSWORD, {"email": email})

    async def reset_password(self, reset: ResetPasswordRequest) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.RESET_PASSWORD, _body(reset))

    async def change_password(self, change: ChangePasswordRequest) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.CHANGE_PASSWORD, _body(change))

    async def verify_email(self, verification: VerifyEmailRequest) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.VERIFY_EMAIL, _body(verification))

    async def resend_verification_email(self) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.RESEND_VERIFICATION, {})

    async def enable_two_factor(self) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.ENABLE_2FA, {})

    async def disable_two_factor(self, challenge: TwoFactorRequest) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.DISABLE_2FA, _body(challenge))

    async def verify_two_factor(self, challenge: TwoFactorRequest) -> ApiEnvelope[Any]:
        return await self._operation("POST", AuthEndpoints.VERIFY_2FA, _body(challenge))

    # Profile and account

    async def get_profile(self) -> UserProfile:
        body = await self._executor.call("GET", AuthEndpoints.PROFILE)
        return self._store_profile(body)

    async def update_profile(self, changes: UpdateProfileRequest) -> UserProfile:
        body = await self._executor.call("PUT", AuthEndpoints.PROFILE, _body(changes))
        return self._store_profile(body)

    async def delete_account(self) -> ApiEnvelope[Any]:
        envelope = await self._operation("DELETE", AuthEndpoints.DELETE_ACCOUNT, {})
        self._tokens.clear()
        logger.info("Session cleared after account deletion")
        return envelope

    # Session checks

    async def check_session(self) -> bool:
        """Confirm with the platform that a locally valid token is still honoured."""
        if not self.is_authenticated():
            return False
        try:
            await self.get_profile()
        except StorefrontError as exc:
            logger.warning("Session check failed; clearing session: %s", exc)
            self._tokens.clear()
            return False
        return True

    async def extend_session(self) -> bool:
        """Force a token refresh. Never raises; returns whether it succeeded."""
        if not self._tokens.refresh_token:
            return False
        try:
            await self._refresher.refresh()
        except (TokenRefreshError, RefreshTokenMissingError) as exc:
            logger.warning("Session extension failed: %s", exc)
            return False
        return True

    # Helpers

    async def _operation(
        self, method: str, path: str, payload: Dict[str, Any]
    ) -> ApiEnvelope[Any]:
        body = await self._executor.call(method, path, payload)
        return self._require_success(body)

    def _envelope(self, body: Dict[str, Any]) -> ApiEnvelope[Any]:
        try:
            return ApiEnvelope[Any].model_validate(body)
        except ValidationError as exc:
            raise PlatformOperationError(
                "Platform returned an unexpected response shape.", code="INVALID_RESPONSE"
            ) from exc

    def _require_success(self, body: Dict[str, Any]) -> ApiEnvelope[Any]:
        envelope = self._envelope(body)
        if not envelope.success:
            code = envelope.error.code if envelope.error else "OPERATION_FAILED"
            raise PlatformOperationError(
                envelope.error_message, code=code, envelope=envelope
            )
        return envelope

    def _store_profile(self, body: Dict[str, Any]) -> UserProfile:
        envelope = self._require_success(body)
        if not isinstance(envelope.data, dict):
            raise PlatformOperationError(
                "Profile response did not include a user.", envelope=envelope
            )
        try:
            profile = UserProfile.from_payload(envelope.data)
        except ValidationError as exc:
            raise PlatformOperationError(
                "Profile response carried an invalid user.", envelope=envelope
            ) from exc
        self._tokens.save_profile(profile)
        return profile


__all__ = ["AuthEndpoints", "AuthSessionService"]
