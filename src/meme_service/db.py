import logging
from typing import AsyncGenerator

from dishka import AsyncContainer, Provider, Scope
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from . import models  # noqa: F401  registers tables on SQLModel.metadata
from .config import DatabaseConfig

logger = logging.getLogger(__name__)


async def db_engine(settings: DatabaseConfig) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(settings.url, echo=settings.echo)
    yield engine
    await engine.dispose()


async def create_schema(container: AsyncContainer) -> None:
    """Create missing tables before the app starts serving."""
    engine = await container.get(AsyncEngine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info("Database schema is up to date")


db_provider = Provider()
db_provider.provide(db_engine, scope=Scope.APP)
