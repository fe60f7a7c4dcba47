"""
HTTP transport for the e-commerce platform REST API.

The transport knows nothing about tokens: callers pass fully built headers and
receive either the decoded JSON body or a ``PlatformTransportError`` carrying
the HTTP status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

import httpx

from storefront.core.config import PlatformSettings
from storefront.core.errors import PlatformTransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class PlatformRequest:
    """Immutable description of one platform call, safe to re-issue."""

    method: str
    path: str
    json: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls, method: str, path: str, data: Optional[Dict[str, Any]] = None
    ) -> "PlatformRequest":
        """GET sends ``data`` as the query string, other verbs as a JSON body."""
        method = method.upper()
        if method == "GET":
            return cls(method=method, path=path, params=data or None)
        return cls(method=method, path=path, json=data if data is not None else {})

    def with_headers(self, headers: Mapping[str, str]) -> "PlatformRequest":
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)


class PlatformTransport:
    """Issue requests against the platform with a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        settings: PlatformSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=str(settings.base_url),
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    async def send(self, request: PlatformRequest) -> Dict[str, Any]:
        try:
            response = await self._client.request(
                request.method,
                request.path,
                json=request.json,
                params=request.params,
                headers=dict(request.headers),
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Platform request failed before a response arrived: %s",
                exc,
                extra={"path": request.path},
            )
            raise PlatformTransportError(
                f"Could not reach the platform: {exc}", status_code=None
            ) from exc

        if response.is_error:
            raise _error_from_response(response)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise PlatformTransportError(
                "Platform returned a non-JSON response.",
                status_code=response.status_code,
                code="INVALID_RESPONSE",
            ) from exc
        if not isinstance(body, dict):
            raise PlatformTransportError(
                "Platform returned a JSON body that is not an object.",
                status_code=response.status_code,
                code="INVALID_RESPONSE",
            )
        return body

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_from_response(response: httpx.Response) -> PlatformTransportError:
    """Translate an error response into a status-carrying exception."""
    message = response.reason_phrase or f"HTTP {response.status_code}"
    code = "UNKNOWN_ERROR"
    details: Any = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        details = body
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message") or message
            code = error.get("code") or code
        else:
            message = body.get("message") or message
            code = body.get("code") or code

    return PlatformTransportError(
        message, status_code=response.status_code, code=str(code), details=details
    )


__all__ = ["JSON_HEADERS", "PlatformRequest", "PlatformTransport"]
