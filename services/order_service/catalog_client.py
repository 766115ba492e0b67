"""
Read-only client for the menu service.

``lookup`` never raises for remote conditions: the caller gets back one of
``ItemSnapshot``, ``ItemNotFound`` or ``CatalogUnavailable`` so that "the
pizza does not exist" and "the menu service could not tell us" stay distinct.
Every call is a fresh read; nothing is cached.
"""
import math
from dataclasses import dataclass
from urllib.parse import quote

import httpx
import structlog

from shared.observability import pizzeria_catalog_lookups_total

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ItemSnapshot:
    id: str
    name: str
    price: float
    available: bool


@dataclass(frozen=True)
class ItemNotFound:
    item_id: str


@dataclass(frozen=True)
class CatalogUnavailable:
    item_id: str
    cause: str


LookupResult = ItemSnapshot | ItemNotFound | CatalogUnavailable


def _parse_item(item_id: str, payload) -> ItemSnapshot:
    if not isinstance(payload, dict):
        raise ValueError("response body is not a JSON object")
    data = payload.get("data")
    if not isinstance(data, dict):
        raise ValueError("response has no 'data' object")

    price = data["price"]
    if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price) or price < 0:
        raise ValueError(f"invalid price {price!r}")
    available = data.get("available", True)
    if not isinstance(available, bool):
        raise ValueError(f"invalid availability flag {available!r}")

    return ItemSnapshot(
        id=str(data.get("id") or item_id),
        name=str(data["name"]),
        price=float(price),
        available=available,
    )


class CatalogClient:
    def __init__(self, base_url: str, client: httpx.AsyncClient, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def lookup(self, item_id: str) -> LookupResult:
        url = f"{self.base_url}/{quote(item_id, safe='')}"
        try:
            resp = await self.client.get(url, timeout=self.timeout)
        except httpx.HTTPError as e:
            return self._unavailable(item_id, f"{type(e).__name__}: {e}")

        if resp.status_code == 404:
            return self._not_found(item_id)
        if resp.status_code >= 400:
            return self._unavailable(item_id, f"menu service answered HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            return self._unavailable(item_id, "menu service returned a non-JSON body")

        if isinstance(payload, dict) and payload.get("success") is False:
            return self._not_found(item_id)

        try:
            item = _parse_item(item_id, payload)
        except (KeyError, TypeError, ValueError) as e:
            return self._unavailable(item_id, f"malformed catalog item: {e}")

        pizzeria_catalog_lookups_total.labels(outcome="found").inc()
        return item

    def _not_found(self, item_id: str) -> ItemNotFound:
        pizzeria_catalog_lookups_total.labels(outcome="not_found").inc()
        logger.info("catalog_item_not_found", item_id=item_id)
        return ItemNotFound(item_id)

    def _unavailable(self, item_id: str, cause: str) -> CatalogUnavailable:
        pizzeria_catalog_lookups_total.labels(outcome="unavailable").inc()
        logger.warning("catalog_lookup_failed", item_id=item_id, cause=cause)
        return CatalogUnavailable(item_id, cause)
