import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .models import OrderStatus
from .orchestrator import OrderOrchestrator
from .repository import OrderRepository
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)


class OrderService:
    @staticmethod
    async def create_order(db: AsyncSession, orchestrator: OrderOrchestrator, data: OrderCreate):
        return await orchestrator.place_order(db, data)

    @staticmethod
    async def list_orders(db: AsyncSession):
        return await OrderRepository.list_orders(db)

    @staticmethod
    async def list_user_orders(db: AsyncSession, user_id: str):
        return await OrderRepository.list_orders_for_user(db, user_id)

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str):
        return await OrderRepository.get_order(db, order_id)

    @staticmethod
    async def update_status(db: AsyncSession, order_id: str, status: OrderStatus):
        order = await OrderRepository.set_status(db, order_id, status)
        logger.info("order_status_set", order_id=order_id, status=order.status)
        return order

    @staticmethod
    async def cancel_order(db: AsyncSession, order_id: str):
        order = await OrderRepository.cancel_order(db, order_id)
        logger.info("order_cancelled", order_id=order_id)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: str):
        await OrderRepository.delete_order(db, order_id)
        logger.info("order_deleted", order_id=order_id)
