import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shared.config.settings import Settings
from shared.errors import register_error_handlers
from shared.observability import setup_observability
from .interceptors import Interceptor, default_interceptors
from .proxy import GatewayProxy
from .routes import RouteTable
from .router import router, public_router

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    interceptors: list[Interceptor] | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    gateway_app = FastAPI(
        title="API Gateway",
        version="1.0.0",
        # Every path the gateway does not serve itself belongs to the route table
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    gateway_app.state.settings = settings

    routes = RouteTable.from_settings(settings)
    client = httpx.AsyncClient(transport=transport, follow_redirects=False)
    gateway_app.state.http = client
    gateway_app.state.proxy = GatewayProxy(
        routes,
        client,
        default_interceptors() if interceptors is None else interceptors,
    )

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(gateway_app, "api_gateway", settings)
    register_error_handlers(gateway_app, settings, internal_message="Internal Gateway Error")

    gateway_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health and /metrics are registered before the catch-all proxy route
    gateway_app.include_router(public_router)
    gateway_app.include_router(router)

    @gateway_app.on_event("startup")
    async def startup_event():
        for entry in routes:
            logger.info(
                "gateway_route",
                prefix=entry.path_prefix,
                upstream=entry.upstream_base_url,
                timeout=entry.timeout,
            )

    @gateway_app.on_event("shutdown")
    async def shutdown_event():
        await gateway_app.state.http.aclose()

    return gateway_app
