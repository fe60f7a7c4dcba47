"""
Single-flight access token refresh.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from storefront.clients.platform_http import JSON_HEADERS, PlatformRequest, PlatformTransport
from storefront.core.errors import (
    PlatformTransportError,
    RefreshTokenMissingError,
    TokenRefreshError,
)
from storefront.models.auth import AuthTokens
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"


class RefreshCoordinator:
    """Collapse concurrent refresh requests into one platform call.

    While a refresh is pending every caller awaits the same task and observes the
    same tokens or the same ``TokenRefreshError``. The pending marker is dropped
    as soon as that task settles, so the next call starts a new attempt.
    """

    def __init__(
        self,
        transport: PlatformTransport,
        token_store: TokenStore,
        *,
        refresh_path: str = REFRESH_PATH,
    ) -> None:
        self._transport = transport
        self._tokens = token_store
        self._refresh_path = refresh_path
        self._pending: Optional[asyncio.Task[AuthTokens]] = None
        self.attempts = 0

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    async def refresh(self) -> AuthTokens:
        if self._pending is None:
            refresh_token = self._tokens.refresh_token
            if not refresh_token:
                raise RefreshTokenMissingError("No refresh token available.")
            self._pending = asyncio.create_task(self._run(refresh_token))
        # Waiters may be cancelled; the shared refresh still runs to completion.
        return await asyncio.shield(self._pending)

    async def _run(self, refresh_token: str) -> AuthTokens:
        self.attempts += 1
        logger.info("Refreshing platform access token")
        try:
            return await self._exchange(refresh_token)
        finally:
            self._pending = None

    async def _exchange(self, refresh_token: str) -> AuthTokens:
        request = PlatformRequest.build(
            "POST", self._refresh_path, {"refresh_token": refresh_token}
        ).with_headers(JSON_HEADERS)

        try:
            body = await self._transport.send(request)
        except PlatformTransportError as exc:
            if exc.is_transient:
                logger.warning(
                    "Token refresh failed transiently; keeping stored session",
                    extra={"status_code": exc.status_code},
                )
                raise TokenRefreshError(
                    f"Token refresh could not complete: {exc.message}", rejected=False
                ) from exc
            self._reject("platform refused the refresh token")
            raise TokenRefreshError(
                f"Token refresh rejected: {exc.message}", rejected=True
            ) from exc

        data = _grant_payload(body)
        if data is None:
            self._reject("unsuccessful refresh response")
            raise TokenRefreshError("Invalid refresh response.", rejected=True)

        try:
            tokens = AuthTokens.from_grant(
                data,
                issued_at=self._tokens.now(),
                fallback_refresh_token=refresh_token,
            )
        except ValueError as exc:
            self._reject("incomplete refresh payload")
            raise TokenRefreshError(str(exc), rejected=True) from exc

        self._tokens.save(tokens)
        logger.info(
            "Access token refreshed",
            extra={"expires_at": tokens.expires_at.isoformat()},
        )
        return tokens

    def _reject(self, reason: str) -> None:
        logger.warning("Clearing session after refresh failure: %s", reason)
        self._tokens.clear()


def _grant_payload(body: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(body, dict) or not body.get("success"):
        return None
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    return data


__all__ = ["REFRESH_PATH", "RefreshCoordinator"]
