"""
🗄️ DATABASE ИНИЦИАЛИЗАЦИЯ

Экспортируем все нужные функции и объекты.
"""

from infrastructure.database.base import (
    Base,
    engine,
    async_session_maker,
    get_db_session,
    init_db,
    close_db,
)

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "get_db_session",
    "init_db",
    "close_db",
]
