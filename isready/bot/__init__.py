"""
Telegram бот владельца мастерской.
"""

from aiogram import Dispatcher
from aiogram.fsm.storage.base import BaseStorage

from isready.bot.handlers import main_router
from isready.bot.middlewares import DatabaseMiddleware, LoggingMiddleware


def create_dispatcher(storage: BaseStorage) -> Dispatcher:
    """
    Диспетчер со всеми middleware и обработчиками.

    Middleware добавляются в порядке FIFO:
    сначала логируем, потом открываем сессию БД.
    """
    dp = Dispatcher(storage=storage)

    for observer in (dp.message, dp.callback_query):
        observer.middleware(LoggingMiddleware())
        observer.middleware(DatabaseMiddleware())

    dp.include_router(main_router)

    return dp


__all__ = ["create_dispatcher"]
