try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from storefront.clients.platform_http import JSON_HEADERS, PlatformRequest, PlatformTransport
from storefront.core.config import PlatformSettings
from storefront.core.errors import PlatformTransportError


def _transport(handler) -> PlatformTransport:
    settings = PlatformSettings(
        PLATFORM_API_BASE_URL="https://platform.example/api/v2",
        PLATFORM_TIMEOUT_SECONDS=5,
    )
    return PlatformTransport(settings, transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_send_posts_json_body_under_base_path() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {"ok": 1}})

    transport = _transport(handler)
    request = PlatformRequest.build("post", "/auth/login", {"email": "a@b.c"})
    body = await transport.send(request.with_headers(JSON_HEADERS))
    await transport.aclose()

    assert body == {"success": True, "data": {"ok": 1}}
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/v2/auth/login"
    assert json.loads(seen[0].content) == {"email": "a@b.c"}
    assert seen[0].headers["accept"] == "application/json"
    assert "authorization" not in seen[0].headers


@pytest.mark.anyio
async def test_get_sends_data_as_query_string() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    transport = _transport(handler)
    await transport.send(PlatformRequest.build("GET", "/user/profile", {"lang": "ar"}))
    await transport.aclose()

    assert seen[0].url.params["lang"] == "ar"
    assert seen[0].content == b""


@pytest.mark.anyio
async def test_unauthorized_response_carries_status_and_platform_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401,
            json={"success": False, "error": {"message": "Token expired", "code": "TOKEN_EXPIRED"}},
        )

    transport = _transport(handler)
    with pytest.raises(PlatformTransportError) as excinfo:
        await transport.send(PlatformRequest.build("GET", "/user/profile"))
    await transport.aclose()

    error = excinfo.value
    assert error.status_code == 401
    assert error.is_unauthorized is True
    assert error.is_transient is False
    assert error.message == "Token expired"
    assert error.code == "TOKEN_EXPIRED"


@pytest.mark.anyio
async def test_server_error_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    transport = _transport(handler)
    with pytest.raises(PlatformTransportError) as excinfo:
        await transport.send(PlatformRequest.build("GET", "/user/profile"))
    await transport.aclose()

    assert excinfo.value.status_code == 503
    assert excinfo.value.is_transient is True
    assert excinfo.value.is_unauthorized is False


@pytest.mark.anyio
async def test_network_failure_has_no_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = _transport(handler)
    with pytest.raises(PlatformTransportError) as excinfo:
        await transport.send(PlatformRequest.build("POST", "/auth/refresh", {}))
    await transport.aclose()

    assert excinfo.value.status_code is None
    assert excinfo.value.is_transient is True


@pytest.mark.anyio
async def test_empty_success_body_decodes_to_empty_dict() -> None:
    transport = _transport(lambda request: httpx.Response(204))
    assert await transport.send(PlatformRequest.build("POST", "/auth/logout", {})) == {}
    await transport.aclose()


@pytest.mark.anyio
@pytest.mark.parametrize("payload", [[], None, "ok"])
async def test_non_object_success_body_is_invalid_response(payload) -> None:
    transport = _transport(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(PlatformTransportError) as excinfo:
        await transport.send(PlatformRequest.build("POST", "/auth/refresh", {}))

    assert excinfo.value.code == "INVALID_RESPONSE"
    assert excinfo.value.is_transient is False
    await transport.aclose()
