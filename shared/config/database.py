from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .settings import Settings

Base = declarative_base()


class Database:
    """Engine + session factory for one service, built from Settings at startup."""

    def __init__(self, settings: Settings):
        self.engine = create_async_engine(settings.database_url, echo=settings.sql_echo)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()


async def get_db(request: Request):
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
