# isready/bot/middlewares/database.py
"""
Middleware для подачи БД сессии в каждый обработчик.

Логика:
1. Создаем сессию
2. Передаем её обработчику как аргумент `session`
3. После обработчика закрываем сессию (ошибка = rollback)
"""

from typing import Any, Awaitable, Callable

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.base import async_session_maker

logger = structlog.get_logger()


class DatabaseMiddleware(BaseMiddleware):
    """Middleware который подает AsyncSession в контекст."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] = async_session_maker):
        self.session_maker = session_maker

    async def __call__(
        self,
        handler: Callable[[Message | CallbackQuery, dict[str, Any]], Awaitable[Any]],
        event: Message | CallbackQuery,
        data: dict[str, Any]
    ) -> Any:
        async with self.session_maker() as session:
            data["session"] = session
            try:
                return await handler(event, data)
            except Exception as e:
                await session.rollback()
                logger.error("database_error", error=str(e), error_type=type(e).__name__)
                raise
