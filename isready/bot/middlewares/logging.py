# isready/bot/middlewares/logging.py
"""
Middleware для логирования всех событий.
"""

from typing import Any, Awaitable, Callable

import structlog
from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message

logger = structlog.get_logger()


class LoggingMiddleware(BaseMiddleware):
    """Логирует каждое сообщение и нажатие кнопки."""

    async def __call__(
        self,
        handler: Callable[[Message | CallbackQuery, dict[str, Any]], Awaitable[Any]],
        event: Message | CallbackQuery,
        data: dict[str, Any]
    ) -> Any:
        if isinstance(event, Message):
            logger.info(
                "message_received",
                user_id=event.from_user.id if event.from_user else None,
                text=event.text[:50] if event.text else None
            )
        elif isinstance(event, CallbackQuery):
            logger.info(
                "callback_received",
                user_id=event.from_user.id,
                callback_data=event.data
            )

        return await handler(event, data)
