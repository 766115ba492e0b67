import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _default_database_url() -> str:
    db_user = os.getenv("POSTGRES_USER", "postgres")
    db_password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db_host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    db_port = os.getenv("POSTGRES_PORT", "5433")
    db_name = os.getenv("POSTGRES_DB", "pizzeria")
    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, built once at startup and handed to every
    app factory, client and database. Nothing reads the environment after this.
    """

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///./pizzeria.db"
    sql_echo: bool = False

    auth_service_url: str = "http://localhost:3001"
    menu_service_url: str = "http://localhost:3002"
    order_service_url: str = "http://localhost:3003"
    # Base address the order service uses to read catalog items
    catalog_lookup_url: str = "http://localhost:3002/api/menu"

    gateway_timeout_seconds: float = 60.0
    catalog_timeout_seconds: float = 10.0
    max_concurrent_lookups: int = 8
    order_delete_mode: str = "admin"  # "admin" deletes, "cancel" cancels

    log_level: str = "INFO"
    tracing_enabled: bool = True
    metrics_enabled: bool = True
    otlp_endpoint: str = "http://localhost:4317"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        menu_service_url = os.getenv("MENU_SERVICE_URL", cls.menu_service_url)
        settings = cls(
            environment=os.getenv("ENVIRONMENT", cls.environment),
            database_url=os.getenv("DATABASE_URL") or _default_database_url(),
            sql_echo=_env_bool("SQL_ECHO", cls.sql_echo),
            auth_service_url=os.getenv("AUTH_SERVICE_URL", cls.auth_service_url),
            menu_service_url=menu_service_url,
            order_service_url=os.getenv("ORDER_SERVICE_URL", cls.order_service_url),
            catalog_lookup_url=os.getenv(
                "CATALOG_LOOKUP_URL", f"{menu_service_url.rstrip('/')}/api/menu"
            ),
            gateway_timeout_seconds=float(
                os.getenv("GATEWAY_TIMEOUT_SECONDS", cls.gateway_timeout_seconds)
            ),
            catalog_timeout_seconds=float(
                os.getenv("CATALOG_TIMEOUT_SECONDS", cls.catalog_timeout_seconds)
            ),
            max_concurrent_lookups=int(
                os.getenv("MAX_CONCURRENT_LOOKUPS", cls.max_concurrent_lookups)
            ),
            order_delete_mode=os.getenv("ORDER_DELETE_MODE", cls.order_delete_mode).lower(),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            tracing_enabled=_env_bool("TRACING_ENABLED", cls.tracing_enabled),
            metrics_enabled=_env_bool("METRICS_ENABLED", cls.metrics_enabled),
            otlp_endpoint=os.getenv("OTLP_ENDPOINT", cls.otlp_endpoint),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.order_delete_mode not in {"admin", "cancel"}:
            raise ValueError(
                f"ORDER_DELETE_MODE must be 'admin' or 'cancel', got {self.order_delete_mode!r}"
            )
        if self.gateway_timeout_seconds <= 0 or self.catalog_timeout_seconds <= 0:
            raise ValueError("Timeouts must be positive")
        if self.max_concurrent_lookups < 1:
            raise ValueError("MAX_CONCURRENT_LOOKUPS must be at least 1")
