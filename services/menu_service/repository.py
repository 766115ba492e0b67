from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Pizza

class PizzaRepository:

    @staticmethod
    async def create_pizza(db: AsyncSession, pizza: Pizza):
        db.add(pizza)
        await db.commit()
        await db.refresh(pizza)
        return pizza

    @staticmethod
    async def get_all_pizzas(db: AsyncSession):
        result = await db.execute(select(Pizza).order_by(Pizza.created_at))
        return result.scalars().all()

    @staticmethod
    async def get_pizza_by_id(db: AsyncSession, pizza_id: str):
        result = await db.execute(select(Pizza).where(Pizza.id == pizza_id))
        return result.scalars().first()

    @staticmethod
    async def get_pizza_by_name(db: AsyncSession, name: str):
        result = await db.execute(select(Pizza).where(Pizza.name == name))
        return result.scalars().first()

    @staticmethod
    async def update_pizza(db: AsyncSession, pizza: Pizza):
        db.add(pizza)
        await db.commit()
        await db.refresh(pizza)
        return pizza

    @staticmethod
    async def delete_pizza(db: AsyncSession, pizza: Pizza):
        await db.delete(pizza)
        await db.commit()
