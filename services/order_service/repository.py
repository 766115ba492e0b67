from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shared.errors import ConflictError, NotFoundError

from .models import CANCELLABLE_STATUSES, Order, OrderStatus, PaymentStatus, utcnow


class OrderRepository:
    """
    Persistence and status lifecycle for orders.

    Every mutation goes through ``_save``, which refreshes ``updated_at``
    before committing. Concurrent writers to one order are last-writer-wins.
    """

    @staticmethod
    async def _save(db: AsyncSession, order: Order) -> Order:
        order.touch()
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        now = utcnow()
        order.status = OrderStatus.PENDING.value
        order.payment_status = PaymentStatus.PENDING.value
        order.created_at = now
        order.updated_at = now

        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def find_order(db: AsyncSession, order_id: str) -> Order | None:
        result = await db.execute(select(Order).where(Order.id == order_id))
        return result.scalars().first()

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str) -> Order:
        order = await OrderRepository.find_order(db, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    async def list_orders(db: AsyncSession) -> list[Order]:
        result = await db.execute(select(Order).order_by(Order.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def list_orders_for_user(db: AsyncSession, user_id: str) -> list[Order]:
        result = await db.execute(
            select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def set_status(db: AsyncSession, order_id: str, status: OrderStatus) -> Order:
        # Administrative override: any status may follow any other
        order = await OrderRepository.get_order(db, order_id)
        order.status = OrderStatus(status).value
        return await OrderRepository._save(db, order)

    @staticmethod
    async def cancel_order(db: AsyncSession, order_id: str) -> Order:
        order = await OrderRepository.get_order(db, order_id)

        if OrderStatus(order.status) not in CANCELLABLE_STATUSES:
            raise ConflictError(
                "Cannot cancel order that is already being prepared or delivered",
                cause=f"order {order_id} is {order.status}",
            )

        order.status = OrderStatus.CANCELLED.value
        return await OrderRepository._save(db, order)

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: str) -> None:
        order = await OrderRepository.get_order(db, order_id)
        await db.delete(order)
        await db.commit()
