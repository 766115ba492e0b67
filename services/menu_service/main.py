from fastapi import FastAPI
from shared.config.database import Database
from shared.config.settings import Settings
from shared.errors import register_error_handlers
from shared.observability import setup_observability
from .router import router, public_router
from .models import Pizza  # noqa: F401 (registers model with SQLAlchemy Base)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    menu_app = FastAPI(title="Menu Service", version="1.0.0", redirect_slashes=False)
    menu_app.state.settings = settings
    menu_app.state.database = Database(settings)

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(menu_app, "menu_service", settings)
    register_error_handlers(menu_app, settings)

    menu_app.include_router(public_router)
    menu_app.include_router(router)

    @menu_app.on_event("startup")
    async def startup_event():
        await menu_app.state.database.create_all()

    @menu_app.on_event("shutdown")
    async def shutdown_event():
        await menu_app.state.database.dispose()

    return menu_app
