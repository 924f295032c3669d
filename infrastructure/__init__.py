"""Инфраструктура приложения."""

from .logger import logger, setup_logging
from .redis_storage import create_fsm_storage, check_storage_connection
from .database import engine, async_session_maker, get_db_session, init_db, close_db

__all__ = [
    "logger",
    "setup_logging",
    "create_fsm_storage",
    "check_storage_connection",
    "engine",
    "async_session_maker",
    "get_db_session",
    "init_db",
    "close_db",
]
