# infrastructure/database/base.py
"""
🗄️ ПОДКЛЮЧЕНИЕ К БД

Асинхронный движок SQLAlchemy и фабрика сессий.

Локально работаем с SQLite (aiosqlite), в продакшене с PostgreSQL (asyncpg).
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from config.settings import config
from infrastructure.logger import logger

# Base — базовый класс для всех моделей
Base = declarative_base()

engine = create_async_engine(
    config.async_database_url,
    echo=False,
)

# expire_on_commit=False: после commit() объекты остаются читаемыми
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    Сессия БД на один запрос (FastAPI dependency).

    Пример:
        @router.get("/orders")
        async def list_orders(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_maker() as session:
        yield session


async def init_db():
    """Создаёт таблицы если их нет."""

    # Импорт регистрирует модели в Base.metadata
    from infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("database_tables_ready")


async def close_db():
    """Закрывает пул соединений."""

    await engine.dispose()
