import json

import httpx
import pytest

from clinicsync.client.errors import (
    NETWORK_UNREACHABLE_MESSAGE, NetworkUnreachable, ServerRejected, Unclassified
)
from clinicsync.client.gateway import ApiGatewayClient
from clinicsync.client.middleware import LoadingTracker

pytestmark = pytest.mark.anyio


def make_gateway(handler, sink, middlewares=(), token_header="atoken"):
    return ApiGatewayClient(
        "http://backend.test",
        token_header,
        sink,
        middlewares=middlewares,
        transport=httpx.MockTransport(handler),
    )


def responding(status_code=200, **kwargs):
    def handler(request):
        return httpx.Response(status_code, **kwargs)
    return handler


def failing(exc_type):
    def handler(request):
        raise exc_type("boom", request=request)
    return handler


async def test_credential_sent_in_both_headers(sink):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    gateway = make_gateway(handler, sink, token_header="dtoken")
    await gateway.request("GET", "/api/doctor/profile", credential="tok-1", action="fetching profile data")

    headers = seen[0].headers
    assert headers["dtoken"] == "tok-1"
    assert headers["authorization"] == "Bearer tok-1"


async def test_no_credential_no_auth_headers(sink):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    gateway = make_gateway(handler, sink)
    await gateway.request("GET", "/api/doctor/list", action="fetching doctors")

    assert "atoken" not in seen[0].headers
    assert "authorization" not in seen[0].headers


async def test_body_sent_as_json(sink):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    gateway = make_gateway(handler, sink)
    await gateway.request("post", "/api/admin/change-availability", {"docId": 3}, action="changing doctor availability")

    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"docId": 3}


async def test_success_returns_payload(sink):
    gateway = make_gateway(responding(json={"success": True, "doctors": [{"id": 1}]}), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors", expect="doctors")

    assert result.ok
    assert result.payload["doctors"] == [{"id": 1}]
    assert sink.events == []


@pytest.mark.parametrize("exc_type", [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError])
async def test_transport_failure_is_network_unreachable(sink, exc_type):
    gateway = make_gateway(failing(exc_type), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors")

    assert isinstance(result.error, NetworkUnreachable)
    assert result.error.status_code is None
    assert sink.errors == [NETWORK_UNREACHABLE_MESSAGE]


async def test_network_message_ignores_operation(sink):
    gateway = make_gateway(failing(httpx.ConnectError), sink)
    await gateway.request("GET", "/a", action="fetching doctors")
    await gateway.request("POST", "/b", {"appointmentId": 1}, action="cancelling appointment")

    assert sink.errors == [NETWORK_UNREACHABLE_MESSAGE, NETWORK_UNREACHABLE_MESSAGE]


async def test_success_false_uses_server_message(sink):
    gateway = make_gateway(responding(json={"success": False, "message": "Doctor not found"}), sink)
    result = await gateway.request("POST", "/x", action="changing doctor availability")

    assert isinstance(result.error, ServerRejected)
    assert result.error.status_code == 200
    assert sink.errors == ["Doctor not found"]


async def test_success_false_without_message_uses_default(sink):
    gateway = make_gateway(responding(json={"success": False}), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors")

    assert isinstance(result.error, ServerRejected)
    assert sink.errors == ["Error fetching doctors"]


async def test_error_status_with_json_body(sink):
    body = {"success": False, "message": "Not Authorized. Login Again"}
    gateway = make_gateway(responding(401, json=body), sink)
    result = await gateway.request("GET", "/x", action="fetching profile data")

    assert isinstance(result.error, ServerRejected)
    assert result.error.status_code == 401
    assert sink.errors == ["Not Authorized. Login Again"]


async def test_error_status_with_text_body(sink):
    gateway = make_gateway(responding(502, text="<html>Bad Gateway</html>"), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors")

    assert isinstance(result.error, Unclassified)
    assert result.error.status_code == 502
    assert sink.errors == ["An error occurred while fetching doctors"]


@pytest.mark.parametrize("body", [
    {"doctors": []},
    {"success": True},
])
async def test_malformed_success_is_unclassified(sink, body):
    gateway = make_gateway(responding(json=body), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors", expect="doctors")

    assert isinstance(result.error, Unclassified)
    assert sink.errors == ["An error occurred while fetching doctors"]


@pytest.mark.parametrize("key, value", [
    ("appointments", None),
    ("doctors", {"id": 1}),
    ("dashData", []),
    ("profileData", None),
    ("userData", "pat"),
    ("token", None),
    ("token", ""),
    ("token", 42),
])
async def test_wrongly_shaped_payload_is_unclassified(sink, key, value):
    gateway = make_gateway(responding(json={"success": True, key: value}), sink)
    result = await gateway.request("GET", "/x", action="loading", expect=key)

    assert isinstance(result.error, Unclassified)
    assert sink.errors == ["An error occurred while loading"]


@pytest.mark.parametrize("key, value", [
    ("appointments", []),
    ("dashData", {}),
    ("token", "tok-1"),
])
async def test_well_shaped_payload_succeeds(sink, key, value):
    gateway = make_gateway(responding(json={"success": True, key: value}), sink)
    result = await gateway.request("GET", "/x", action="loading", expect=key)

    assert result.ok
    assert result.payload[key] == value


async def test_rejected_message_override(sink):
    gateway = make_gateway(responding(json={"success": False}), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors", rejected="Failed to fetch doctors list")

    assert isinstance(result.error, ServerRejected)
    assert sink.errors == ["Failed to fetch doctors list"]


async def test_json_array_is_unclassified(sink):
    gateway = make_gateway(responding(json=[1, 2, 3]), sink)
    result = await gateway.request("GET", "/x", action="fetching doctors")

    assert isinstance(result.error, Unclassified)
    assert len(sink.errors) == 1


async def test_announced_success(sink):
    gateway = make_gateway(responding(json={"success": True, "message": "Appointment Cancelled"}), sink)
    await gateway.request("POST", "/x", action="cancelling appointment", announce=True)
    await gateway.request("POST", "/x", action="cancelling appointment")

    assert sink.events == [("success", "Appointment Cancelled")]


async def test_loading_tracker_clears_on_every_outcome(sink):
    tracker = LoadingTracker()
    observed = []

    def handler(request):
        observed.append(tracker.outstanding)
        if request.url.path == "/down":
            raise httpx.ConnectError("down", request=request)
        if request.url.path == "/rejected":
            return httpx.Response(200, json={"success": False, "message": "no"})
        return httpx.Response(200, json={"success": True})

    gateway = make_gateway(handler, sink, middlewares=(tracker,))
    for path in ("/ok", "/rejected", "/down"):
        await gateway.request("GET", path, action="loading")
        assert tracker.outstanding == 0
        assert not tracker.is_loading

    assert observed == [1, 1, 1]


async def test_middlewares_run_outermost_first(sink):
    order = []

    def tagging(tag):
        async def middleware(call, call_next):
            order.append(f"{tag}:in")
            result = await call_next(call)
            order.append(f"{tag}:out")
            return result
        return middleware

    gateway = make_gateway(responding(json={"success": True}), sink, middlewares=(tagging("a"), tagging("b")))
    await gateway.request("GET", "/x", action="loading")

    assert order == ["a:in", "b:in", "b:out", "a:out"]
