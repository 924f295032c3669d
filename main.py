# main.py
"""
🚀 ГЛАВНЫЙ ФАЙЛ ЗАПУСКА

Запускает в одном процессе:
- Telegram бот владельца мастерской (polling)
- JSON API для браузерного дашборда (uvicorn)
"""

import asyncio

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
import uvicorn

from config.settings import config
from infrastructure.logger import setup_logging
from infrastructure.database.base import init_db, close_db
from infrastructure.redis_storage import create_fsm_storage, check_storage_connection
from isready.api import create_app
from isready.bot import create_dispatcher

import structlog

logger = structlog.get_logger()


# ==========================================
# 🤖 BOT
# ==========================================

async def run_bot():
    """Polling Telegram. Без BOT_TOKEN бот не стартует, API работает дальше."""

    if not config.bot_token:
        logger.warning("bot_token_missing", message="BOT_TOKEN не установлен, бот не запущен")
        return

    storage = create_fsm_storage()
    if not await check_storage_connection(storage):
        raise RuntimeError("FSM storage is not reachable")

    bot = Bot(
        token=config.bot_token,
        default=DefaultBotProperties(parse_mode="HTML")
    )
    dp = create_dispatcher(storage)

    try:
        me = await bot.get_me()
        logger.info("polling_started", bot_username=f"@{me.username}")

        await dp.start_polling(bot)

    except asyncio.CancelledError:
        logger.info("polling_cancelled")
        raise

    except Exception as e:
        logger.error("bot_polling_error", error=str(e), error_type=type(e).__name__)
        raise

    finally:
        await bot.session.close()
        await storage.close()
        logger.info("bot_session_closed")


# ==========================================
# 🌐 API
# ==========================================

async def run_api():
    # БД уже инициализирована в main(), lifespan не нужен
    server = uvicorn.Server(
        uvicorn.Config(
            create_app(use_lifespan=False),
            host=config.api_host,
            port=config.api_port,
            log_level="info",
            access_log=True,
        )
    )

    logger.info("fastapi_starting", host=config.api_host, port=config.api_port)

    await server.serve()


# ==========================================
# 🚀 ГЛАВНАЯ ФУНКЦИЯ ЗАПУСКА
# ==========================================

async def main():
    setup_logging()
    logger.info("application_start", environment=config.environment)

    try:
        await init_db()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    try:
        # Если один упадёт, упадут оба
        await asyncio.gather(run_bot(), run_api())

    finally:
        await close_db()
        logger.info("app_shutdown")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("app_interrupted", message="⛔ Остановлено пользователем (Ctrl+C)")
