from prometheus_client import Counter, Histogram

# Business Metrics
pizzeria_orders_total = Counter(
    "pizzeria_orders_total",
    "Order creation attempts",
    ["outcome"] # Labels: 'created', 'not_found', 'unavailable', 'conflict'
)

pizzeria_order_creation_duration_seconds = Histogram(
    "pizzeria_order_creation_duration_seconds",
    "Time spent validating, pricing and persisting one order"
)

pizzeria_catalog_lookups_total = Counter(
    "pizzeria_catalog_lookups_total",
    "Catalog item lookups issued by the order service",
    ["outcome"] # Labels: 'found', 'not_found', 'unavailable'
)

# Gateway Metrics
pizzeria_gateway_requests_total = Counter(
    "pizzeria_gateway_requests_total",
    "Requests forwarded by the gateway",
    ["route", "status_code"]
)

pizzeria_gateway_failures_total = Counter(
    "pizzeria_gateway_failures_total",
    "Forwarded requests that failed at the transport level",
    ["route", "reason"] # Labels: reason='timeout', 'connect', 'transport'
)
