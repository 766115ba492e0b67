import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import NotFoundError, ValidationError

from .models import Pizza
from .repository import PizzaRepository
from .schemas import PizzaCreate, PizzaUpdate

logger = structlog.get_logger(__name__)


class MenuService:

    @staticmethod
    async def create_pizza(db: AsyncSession, data: PizzaCreate):
        if await PizzaRepository.get_pizza_by_name(db, data.name):
            raise ValidationError("Pizza with this name already exists")

        pizza = Pizza(**data.model_dump())
        pizza = await PizzaRepository.create_pizza(db, pizza)
        logger.info("pizza_created", pizza_id=pizza.id, name=pizza.name, price=pizza.price)
        return pizza

    @staticmethod
    async def list_pizzas(db: AsyncSession):
        return await PizzaRepository.get_all_pizzas(db)

    @staticmethod
    async def get_pizza(db: AsyncSession, pizza_id: str):
        pizza = await PizzaRepository.get_pizza_by_id(db, pizza_id)
        if not pizza:
            raise NotFoundError("Pizza not found")
        return pizza

    @staticmethod
    async def update_pizza(db: AsyncSession, pizza_id: str, data: PizzaUpdate):
        pizza = await MenuService.get_pizza(db, pizza_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name and new_name != pizza.name:
            if await PizzaRepository.get_pizza_by_name(db, new_name):
                raise ValidationError("Pizza with this name already exists")

        for field, value in changes.items():
            setattr(pizza, field, value)
        pizza = await PizzaRepository.update_pizza(db, pizza)
        logger.info("pizza_updated", pizza_id=pizza.id, fields=sorted(changes))
        return pizza

    @staticmethod
    async def delete_pizza(db: AsyncSession, pizza_id: str):
        pizza = await MenuService.get_pizza(db, pizza_id)
        await PizzaRepository.delete_pizza(db, pizza)
        logger.info("pizza_deleted", pizza_id=pizza_id)
