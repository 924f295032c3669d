# infrastructure/redis_storage.py
"""
🔴 FSM STORAGE

Хранилище состояний мастера "Новый заказ" (aiogram FSM).
Владелец мастерской вводит заказ в несколько шагов, и бот
должен помнить на каком шаге он находится.

Если REDIS_URL задан - состояния живут в Redis и переживают
перезапуск бота. Если нет - в памяти процесса.
"""

from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage
from redis.asyncio.client import Redis

from config.settings import config
from infrastructure.logger import logger


def create_fsm_storage(redis_url: str = None) -> BaseStorage:
    """
    Создать хранилище FSM.

    Пример:
        storage = create_fsm_storage("redis://localhost:6379/0")
        dp = Dispatcher(storage=storage)
    """
    redis_url = config.redis_url if redis_url is None else redis_url

    if not redis_url:
        logger.info("fsm_storage_memory")
        return MemoryStorage()

    redis = Redis.from_url(redis_url, decode_responses=True)
    logger.info("fsm_storage_redis", redis_url=redis_url)
    return RedisStorage(redis=redis)


async def check_storage_connection(storage: BaseStorage) -> bool:
    """
    Проверяет что Redis живой и отвечает.
    Для MemoryStorage всегда True.
    """

    if not isinstance(storage, RedisStorage):
        return True

    try:
        await storage.redis.ping()
        return True
    except Exception as e:
        logger.error("redis_connection_error", error=str(e))
        return False


__all__ = [
    "create_fsm_storage",
    "check_storage_connection",
]
