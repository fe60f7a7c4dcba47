"""
Authenticated request stage with one-shot recovery from a rejected token.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from storefront.clients.platform_http import JSON_HEADERS, PlatformRequest, PlatformTransport
from storefront.core.errors import (
    PlatformTransportError,
    RefreshTokenMissingError,
    TokenRefreshError,
)
from storefront.services.token_refresh import RefreshCoordinator
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class ResilientRequestExecutor:
    """Attach bearer credentials and retry once after a 401.

    A logical request makes at most two transport calls. When recovery fails the
    caller receives the original 401 error, never the refresh error.
    """

    def __init__(
        self,
        transport: PlatformTransport,
        token_store: TokenStore,
        refresher: RefreshCoordinator,
    ) -> None:
        self._transport = transport
        self._tokens = token_store
        self._refresher = refresher

    def _authorize(self, request: PlatformRequest) -> PlatformRequest:
        headers = dict(JSON_HEADERS)
        headers.update(self._tokens.authorization_header())
        return request.with_headers(headers)

    async def send(
        self, request: PlatformRequest, *, recover: bool = True
    ) -> Dict[str, Any]:
        """Send ``request``; ``recover=False`` skips the refresh-and-retry cycle."""
        try:
            return await self._transport.send(self._authorize(request))
        except PlatformTransportError as exc:
            if not recover or not exc.is_unauthorized or self._tokens.tokens is None:
                raise
            original = exc

        logger.info(
            "Platform rejected access token; refreshing and retrying once",
            extra={"path": request.path},
        )
        try:
            await self._refresher.refresh()
        except (TokenRefreshError, RefreshTokenMissingError) as refresh_exc:
            raise original from refresh_exc

        try:
            return await self._transport.send(self._authorize(request))
        except PlatformTransportError as retry_exc:
            logger.warning(
                "Retry after token refresh failed",
                extra={"path": request.path, "status_code": retry_exc.status_code},
            )
            if retry_exc.is_unauthorized:
                # A freshly issued token was refused too; the session is unusable.
                self._tokens.clear()
            raise original from retry_exc

    async def call(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        *,
        recover: bool = True,
    ) -> Dict[str, Any]:
        """Convenience wrapper building the request from a verb, path and payload."""
        return await self.send(PlatformRequest.build(method, path, data), recover=recover)


__all__ = ["ResilientRequestExecutor"]
