try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import pytest

from _fakes import ScriptedTransport, Wiring, grant, unauthorized
from storefront.clients.platform_http import PlatformRequest
from storefront.core.errors import PlatformTransportError
from storefront.services.token_refresh import REFRESH_PATH

ORDERS = "/orders"
OK = {"status": 200, "success": True, "data": []}


def _accepts(token: str):
    """Respond OK only to requests carrying ``token``."""

    def responder(request: PlatformRequest):
        if request.headers.get("Authorization") == f"Bearer {token}":
            return OK
        return unauthorized()

    return responder


@pytest.mark.anyio
async def test_unauthenticated_request_has_no_authorization_header() -> None:
    transport = ScriptedTransport({ORDERS: [OK]})
    wiring = Wiring(transport)

    assert await wiring.executor.call("GET", ORDERS) == OK

    headers = transport.requests[0].headers
    assert "Authorization" not in headers
    assert headers["Accept"] == "application/json"
    assert headers["Content-Type"] == "application/json"


@pytest.mark.anyio
async def test_authenticated_request_carries_bearer_token() -> None:
    transport = ScriptedTransport({ORDERS: [OK]})
    wiring = Wiring(transport)
    wiring.sign_in(access="access-1")

    await wiring.executor.call("GET", ORDERS)

    assert transport.requests[0].headers["Authorization"] == "Bearer access-1"


@pytest.mark.anyio
async def test_unauthorized_response_is_retried_once_with_new_token() -> None:
    transport = ScriptedTransport(
        {ORDERS: _accepts("access-2"), REFRESH_PATH: [grant(access="access-2")]}
    )
    wiring = Wiring(transport)
    wiring.sign_in(access="access-1")

    assert await wiring.executor.call("GET", ORDERS, {"page": 1}) == OK

    orders = [request for request in transport.requests if request.path == ORDERS]
    assert len(orders) == 2
    assert orders[0].params == orders[1].params == {"page": 1}
    assert orders[1].headers["Authorization"] == "Bearer access-2"
    assert transport.calls(REFRESH_PATH) == 1


@pytest.mark.anyio
async def test_retry_bound_surfaces_original_failure_after_two_calls() -> None:
    original = unauthorized("first rejection")
    transport = ScriptedTransport(
        {
            ORDERS: [original, unauthorized("second rejection")],
            REFRESH_PATH: [grant(access="access-2")],
        }
    )
    wiring = Wiring(transport)
    wiring.sign_in()

    with pytest.raises(PlatformTransportError) as excinfo:
        await wiring.executor.call("GET", ORDERS)

    assert excinfo.value is original
    assert transport.calls(ORDERS) == 2
    assert transport.calls(REFRESH_PATH) == 1
    assert wiring.tokens.is_authenticated() is False
    assert wiring.backing.keys() == []


@pytest.mark.anyio
async def test_refresh_failure_surfaces_original_unauthorized() -> None:
    original = unauthorized("expired")
    transport = ScriptedTransport(
        {ORDERS: [original], REFRESH_PATH: [unauthorized("refresh revoked")]}
    )
    wiring = Wiring(transport)
    wiring.sign_in()

    with pytest.raises(PlatformTransportError) as excinfo:
        await wiring.executor.call("GET", ORDERS)

    assert excinfo.value is original
    assert transport.calls(ORDERS) == 1
    assert wiring.tokens.is_authenticated() is False


@pytest.mark.anyio
async def test_unauthorized_without_tokens_is_not_recovered() -> None:
    transport = ScriptedTransport({ORDERS: [unauthorized()], REFRESH_PATH: [grant()]})
    wiring = Wiring(transport)

    with pytest.raises(PlatformTransportError):
        await wiring.executor.call("GET", ORDERS)

    assert transport.calls(REFRESH_PATH) == 0
    assert transport.calls(ORDERS) == 1


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [None, 403, 404, 500])
async def test_other_failures_propagate_without_refresh(status_code) -> None:
    failure = PlatformTransportError("boom", status_code=status_code)
    transport = ScriptedTransport({ORDERS: [failure], REFRESH_PATH: [grant()]})
    wiring = Wiring(transport)
    wiring.sign_in()

    with pytest.raises(PlatformTransportError) as excinfo:
        await wiring.executor.call("GET", ORDERS)

    assert excinfo.value is failure
    assert transport.calls(REFRESH_PATH) == 0
    assert wiring.tokens.is_authenticated() is True


@pytest.mark.anyio
async def test_recover_false_skips_refresh() -> None:
    transport = ScriptedTransport({ORDERS: [unauthorized()], REFRESH_PATH: [grant()]})
    wiring = Wiring(transport)
    wiring.sign_in()

    with pytest.raises(PlatformTransportError):
        await wiring.executor.call("POST", ORDERS, {}, recover=False)

    assert transport.calls(REFRESH_PATH) == 0
    assert wiring.tokens.is_authenticated() is True


@pytest.mark.anyio
async def test_concurrent_unauthorized_requests_trigger_one_refresh() -> None:
    transport = ScriptedTransport(
        {ORDERS: _accepts("access-2"), REFRESH_PATH: [grant(access="access-2")]}
    )
    wiring = Wiring(transport)
    wiring.sign_in(access="access-1")

    results = await asyncio.gather(*(wiring.executor.call("GET", ORDERS) for _ in range(4)))

    assert results == [OK] * 4
    assert transport.calls(REFRESH_PATH) == 1
    assert transport.calls(ORDERS) == 8


@pytest.mark.anyio
@pytest.mark.parametrize("refresh_body", [[], None, "ok"])
async def test_malformed_refresh_body_surfaces_original_unauthorized(refresh_body) -> None:
    original = unauthorized("expired")
    transport = ScriptedTransport({ORDERS: [original], REFRESH_PATH: [refresh_body]})
    wiring = Wiring(transport)
    wiring.sign_in()

    with pytest.raises(PlatformTransportError) as excinfo:
        await wiring.executor.call("GET", ORDERS)

    assert excinfo.value is original
    assert transport.calls(ORDERS) == 1
