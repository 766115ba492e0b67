"""
Order creation: validate and price every line item against the menu
service, then persist the order in one write.

Lookups never mutate anything, so a failure part-way through needs no
rollback. The single ``create_order`` call after every line has passed is
the only state change.
"""
import asyncio
import time

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import (
    AppError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
)
from shared.observability import pizzeria_order_creation_duration_seconds, pizzeria_orders_total

from .catalog_client import CatalogClient, CatalogUnavailable, ItemNotFound, ItemSnapshot
from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import OrderCreate, OrderLineRequest

logger = structlog.get_logger(__name__)

_OUTCOME_LABELS = {
    NotFoundError: "not_found",
    ServiceUnavailableError: "unavailable",
    ConflictError: "conflict",
}


class OrderOrchestrator:
    def __init__(self, catalog: CatalogClient, max_concurrent_lookups: int = 8):
        self.catalog = catalog
        self.max_concurrent_lookups = max_concurrent_lookups

    async def place_order(self, db: AsyncSession, data: OrderCreate) -> Order:
        started = time.perf_counter()
        log = logger.bind(user_id=data.user_id, line_count=len(data.items))

        try:
            snapshots = await self._price_lines(data.items)
        except AppError as e:
            pizzeria_orders_total.labels(outcome=_OUTCOME_LABELS.get(type(e), "error")).inc()
            log.info("order_rejected", reason=type(e).__name__, message=e.message)
            raise

        total_amount = 0.0
        items = []
        for position, (line, snapshot) in enumerate(zip(data.items, snapshots)):
            total_amount += snapshot.price * line.quantity
            items.append(
                OrderItem(
                    position=position,
                    pizza_id=line.pizza_id,
                    pizza_name=snapshot.name,
                    quantity=line.quantity,
                    price=snapshot.price,
                )
            )

        address = data.delivery_address
        order = Order(
            user_id=data.user_id,
            items=items,
            total_amount=total_amount,
            payment_method=data.payment_method.value,
            delivery_street=address.street,
            delivery_city=address.city,
            delivery_zip_code=address.zip_code,
        )
        order = await OrderRepository.create_order(db, order)

        pizzeria_orders_total.labels(outcome="created").inc()
        pizzeria_order_creation_duration_seconds.observe(time.perf_counter() - started)
        log.info("order_created", order_id=order.id, total_amount=order.total_amount)
        return order

    async def _price_lines(self, lines: list[OrderLineRequest]) -> list[ItemSnapshot]:
        """
        Look up all lines concurrently (at most ``max_concurrent_lookups`` at a
        time). The first failure cancels the lookups still in flight; results
        come back in the caller's line order, not completion order.
        """
        semaphore = asyncio.Semaphore(min(len(lines), self.max_concurrent_lookups))
        tasks = [asyncio.create_task(self._price_line(line, semaphore)) for line in lines]

        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        # Retrieve every failure so none is left unobserved; lowest line index wins
        failures = [t.exception() for t in tasks if not t.cancelled() and t.exception() is not None]
        if failures:
            raise failures[0]
        return [task.result() for task in tasks]

    async def _price_line(self, line: OrderLineRequest, semaphore: asyncio.Semaphore) -> ItemSnapshot:
        async with semaphore:
            result = await self.catalog.lookup(line.pizza_id)

        if isinstance(result, ItemNotFound):
            raise NotFoundError(f"Pizza with ID {line.pizza_id} not found")
        if isinstance(result, CatalogUnavailable):
            raise ServiceUnavailableError(
                f"Menu service unavailable while checking pizza {line.pizza_id}",
                cause=result.cause,
            )
        if not result.available:
            raise ConflictError(f"{result.name} is currently unavailable", cause=f"pizza {line.pizza_id}")
        return result
