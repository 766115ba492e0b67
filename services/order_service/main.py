import httpx
from fastapi import FastAPI
from shared.config.database import Database
from shared.config.settings import Settings
from shared.errors import register_error_handlers
from shared.observability import setup_observability
from .catalog_client import CatalogClient
from .orchestrator import OrderOrchestrator
from .router import router, public_router
from .models import Order, OrderItem  # noqa: F401 (registers models with SQLAlchemy Base)


def create_app(settings: Settings | None = None, catalog_transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    order_app = FastAPI(title="Order Service", version="1.0.0", redirect_slashes=False)
    order_app.state.settings = settings
    order_app.state.database = Database(settings)

    # One pooled client for every catalog lookup made by this process
    catalog_http = httpx.AsyncClient(transport=catalog_transport)
    order_app.state.catalog_http = catalog_http
    order_app.state.orchestrator = OrderOrchestrator(
        CatalogClient(settings.catalog_lookup_url, catalog_http, settings.catalog_timeout_seconds),
        max_concurrent_lookups=settings.max_concurrent_lookups,
    )

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(order_app, "order_service", settings)
    register_error_handlers(order_app, settings)

    order_app.include_router(public_router)
    order_app.include_router(router)

    @order_app.on_event("startup")
    async def startup_event():
        await order_app.state.database.create_all()

    @order_app.on_event("shutdown")
    async def shutdown_event():
        await order_app.state.catalog_http.aclose()
        await order_app.state.database.dispose()

    return order_app
