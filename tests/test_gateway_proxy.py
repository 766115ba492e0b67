import asyncio
import dataclasses
import json
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from services.gateway.interceptors import Interceptor
from services.gateway.main import create_app


class RecordingUpstream:
    def __init__(self, status_code=200, body=None, delay=0.0, error=None):
        self.status_code = status_code
        self.body = body if body is not None else {"success": True}
        self.delay = delay
        self.error = error
        self.requests = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def upstream():
    return RecordingUpstream()


@pytest.fixture
def gateway(settings, upstream):
    app = create_app(settings, transport=httpx.MockTransport(upstream.handler))
    with TestClient(app) as client:
        yield client


def test_health(gateway):
    resp = gateway.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert "timestamp" in body


def test_get_is_forwarded_to_owning_service_and_status_relayed(gateway, upstream):
    upstream.status_code = 404
    upstream.body = {"success": False, "message": "Pizza not found"}

    resp = gateway.get("/api/menu/123")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Pizza not found"}
    forwarded = upstream.requests[0]
    assert forwarded.method == "GET"
    assert str(forwarded.url) == "http://localhost:3002/api/menu/123"


def test_query_string_is_preserved(gateway, upstream):
    gateway.get("/api/orders/user/u1", params={"page": "2"})

    assert str(upstream.requests[0].url) == "http://localhost:3003/api/orders/user/u1?page=2"


def test_json_body_is_reserialized_with_matching_length(gateway, upstream):
    raw = '{"userId": "u1",   "items": [ {"pizzaId": "p1", "quantity": 2} ]}'

    resp = gateway.post("/api/orders", content=raw, headers={"content-type": "application/json"})

    assert resp.status_code == 200
    forwarded = upstream.requests[0]
    expected = json.dumps(json.loads(raw), separators=(",", ":")).encode()
    assert forwarded.content == expected
    assert forwarded.headers["content-length"] == str(len(expected))
    assert forwarded.headers["content-type"] == "application/json"


@pytest.mark.parametrize("method", ["put", "patch"])
def test_update_bodies_are_forwarded(gateway, upstream, method):
    resp = getattr(gateway, method)("/api/orders/abc/status", json={"status": "Delivered"})

    assert resp.status_code == 200
    forwarded = upstream.requests[0]
    assert json.loads(forwarded.content) == {"status": "Delivered"}
    assert forwarded.headers["content-length"] == str(len(forwarded.content))


def test_malformed_json_body_is_rejected(gateway, upstream):
    resp = gateway.post("/api/orders", content="{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert upstream.requests == []


@pytest.mark.parametrize("path", ["/api/unknown/thing", "/openapi.json", "/docs", "/redoc"])
def test_unknown_route_returns_not_found_envelope(gateway, upstream, path):
    resp = gateway.get(path)

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": f"Route {path} not found"}
    assert upstream.requests == []


def test_repeated_response_headers_are_relayed_separately(settings):
    def handler(request):
        return httpx.Response(
            200,
            headers=[("set-cookie", "a=1; Path=/"), ("set-cookie", "b=2; Path=/")],
            json={"success": True},
        )

    app = create_app(settings, transport=httpx.MockTransport(handler))
    with TestClient(app) as client:
        resp = client.get("/api/menu")

    assert resp.status_code == 200
    assert resp.headers.get_list("set-cookie") == ["a=1; Path=/", "b=2; Path=/"]
    assert resp.json() == {"success": True}


def test_similar_prefix_is_not_routed(gateway, upstream):
    resp = gateway.get("/api/menus")

    assert resp.status_code == 404
    assert upstream.requests == []


def test_connection_failure_returns_unavailable_envelope(gateway, upstream):
    upstream.error = lambda request: httpx.ConnectError("Connection refused", request=request)

    resp = gateway.get("/api/auth/me")

    assert resp.status_code == 503
    assert resp.json() == {
        "success": False,
        "message": "Service temporarily unavailable",
        "error": "Connection refused",
    }
    assert len(upstream.requests) == 1  # no retry


def test_cause_is_hidden_in_production(settings, upstream):
    upstream.error = lambda request: httpx.ConnectError("Connection refused", request=request)
    prod = dataclasses.replace(settings, environment="production")

    with TestClient(create_app(prod, transport=httpx.MockTransport(upstream.handler))) as client:
        resp = client.get("/api/menu")

    assert resp.status_code == 503
    assert resp.json() == {"success": False, "message": "Service temporarily unavailable"}


def test_slow_upstream_is_abandoned_at_timeout(settings, upstream):
    upstream.delay = 5.0
    quick = dataclasses.replace(settings, gateway_timeout_seconds=0.2)

    with TestClient(create_app(quick, transport=httpx.MockTransport(upstream.handler))) as client:
        started = time.monotonic()
        resp = client.get("/api/menu/1")
        elapsed = time.monotonic() - started

    assert resp.status_code == 503
    assert resp.json()["message"] == "Service temporarily unavailable"
    assert "0.2s" in resp.json()["error"]
    assert elapsed < 2.0


class TaggingInterceptor(Interceptor):
    def __init__(self):
        self.events = []

    async def on_request(self, request):
        request.headers["x-request-tag"] = "tagged"
        self.events.append(("request", request.url))

    async def on_response(self, request, response):
        self.events.append(("response", response.status_code))

    async def on_error(self, request, error):
        self.events.append(("error", type(error).__name__))


def test_interceptors_run_around_forwarded_call(settings, upstream):
    tagger = TaggingInterceptor()
    app = create_app(settings, transport=httpx.MockTransport(upstream.handler), interceptors=[tagger])

    with TestClient(app) as client:
        client.get("/api/menu/9")
        upstream.error = lambda request: httpx.ConnectError("down", request=request)
        client.get("/api/menu/9")

    assert upstream.requests[0].headers["x-request-tag"] == "tagged"
    assert tagger.events == [
        ("request", "http://localhost:3002/api/menu/9"),
        ("response", 200),
        ("request", "http://localhost:3002/api/menu/9"),
        ("error", "ConnectError"),
    ]
