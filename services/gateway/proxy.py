"""
Forwarding of inbound gateway requests to the upstream services.

Each call is bounded by its route's timeout (connect and full round-trip).
Transport failures surface once as ServiceUnavailableError; nothing is retried.
"""
import asyncio
import json

import httpx
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from shared.errors import ServiceUnavailableError, ValidationError
from shared.responses import error_envelope

from .interceptors import ForwardedRequest, Interceptor
from .routes import RouteEntry, RouteTable

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

# Never copied between hops; host and length are recomputed for the upstream
_HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
    }
)
# httpx hands back decoded bodies, so the upstream encoding no longer applies
_STRIPPED_RESPONSE_HEADERS = _HOP_BY_HOP_HEADERS | {"content-encoding"}


def _is_json(content_type: str | None) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def serialize_body(raw: bytes, content_type: str | None) -> tuple[bytes, str | None]:
    """Parse a JSON body once and re-serialize it; other bodies pass through."""
    if not raw or not _is_json(content_type):
        return raw, content_type
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ValidationError("Malformed JSON body", cause=str(e)) from e
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8"), "application/json"


class GatewayProxy:
    def __init__(self, routes: RouteTable, client: httpx.AsyncClient, interceptors: list[Interceptor]):
        self.routes = routes
        self.client = client
        self.interceptors = list(interceptors)

    async def handle(self, request: Request) -> Response:
        path = request.url.path
        route = self.routes.match(path)
        if route is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=error_envelope(f"Route {path} not found"),
            )

        forwarded = await self._build(request, route)
        for interceptor in self.interceptors:
            await interceptor.on_request(forwarded)

        try:
            upstream = await asyncio.wait_for(self._send(forwarded), timeout=route.timeout)
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            for interceptor in self.interceptors:
                await interceptor.on_error(forwarded, e)
            raise ServiceUnavailableError(cause=self._describe(e, route)) from e

        for interceptor in self.interceptors:
            await interceptor.on_response(forwarded, upstream)

        response = Response(content=upstream.content, status_code=upstream.status_code)
        # Repeated headers (Set-Cookie) must stay separate lines
        response.raw_headers.extend(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in upstream.headers.multi_items()
            if name.lower() not in _STRIPPED_RESPONSE_HEADERS
        )
        return response

    async def _build(self, request: Request, route: RouteEntry) -> ForwardedRequest:
        method = request.method.upper()
        headers = {
            name: value
            for name, value in request.headers.items()
            if name.lower() not in _HOP_BY_HOP_HEADERS
        }

        content = b""
        if method in BODY_METHODS:
            content, content_type = serialize_body(await request.body(), request.headers.get("content-type"))
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
            if content_type:
                headers["content-type"] = content_type
            headers["content-length"] = str(len(content))

        if request.client:
            prior = request.headers.get("x-forwarded-for")
            headers["x-forwarded-for"] = f"{prior}, {request.client.host}" if prior else request.client.host

        url = route.target_url(request.url.path)
        if request.url.query:
            url = f"{url}?{request.url.query}"

        return ForwardedRequest(
            method=method,
            url=url,
            original_path=request.url.path,
            route=route,
            headers=headers,
            content=content,
        )

    async def _send(self, forwarded: ForwardedRequest) -> httpx.Response:
        return await self.client.request(
            forwarded.method,
            forwarded.url,
            headers=forwarded.headers,
            content=forwarded.content or None,
            timeout=httpx.Timeout(forwarded.route.timeout),
        )

    @staticmethod
    def _describe(error: Exception, route: RouteEntry) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"Upstream did not respond within {route.timeout:g}s"
        return str(error) or type(error).__name__
