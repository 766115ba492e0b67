from .setup import setup_observability
from .metrics import (
    pizzeria_orders_total,
    pizzeria_order_creation_duration_seconds,
    pizzeria_catalog_lookups_total,
    pizzeria_gateway_requests_total,
    pizzeria_gateway_failures_total
)
