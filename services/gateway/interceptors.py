import asyncio
from dataclasses import dataclass, field

import httpx
import structlog

from shared.observability import pizzeria_gateway_failures_total, pizzeria_gateway_requests_total

from .routes import RouteEntry

logger = structlog.get_logger(__name__)


@dataclass
class ForwardedRequest:
    """The outgoing call, as interceptors see it. ``on_request`` may mutate it."""

    method: str
    url: str
    original_path: str
    route: RouteEntry
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""


class Interceptor:
    """Hooks run around every forwarded call, in pipeline order."""

    async def on_request(self, request: ForwardedRequest) -> None:
        pass

    async def on_response(self, request: ForwardedRequest, response: httpx.Response) -> None:
        pass

    async def on_error(self, request: ForwardedRequest, error: Exception) -> None:
        pass


def failure_reason(error: Exception) -> str:
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "timeout"
    if isinstance(error, httpx.ConnectError):
        return "connect"
    return "transport"


class LoggingInterceptor(Interceptor):
    async def on_request(self, request):
        logger.info(
            "proxy_request",
            method=request.method,
            path=request.original_path,
            target=request.url,
        )

    async def on_response(self, request, response):
        logger.info(
            "proxy_response",
            method=request.method,
            path=request.original_path,
            status_code=response.status_code,
        )

    async def on_error(self, request, error):
        logger.error(
            "proxy_error",
            method=request.method,
            path=request.original_path,
            target=request.url,
            reason=failure_reason(error),
            error=str(error) or type(error).__name__,
        )


class MetricsInterceptor(Interceptor):
    async def on_response(self, request, response):
        pizzeria_gateway_requests_total.labels(
            route=request.route.path_prefix, status_code=str(response.status_code)
        ).inc()

    async def on_error(self, request, error):
        pizzeria_gateway_failures_total.labels(
            route=request.route.path_prefix, reason=failure_reason(error)
        ).inc()


def default_interceptors() -> list[Interceptor]:
    return [LoggingInterceptor(), MetricsInterceptor()]
