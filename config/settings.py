# config/settings.py
"""
Settings файл - здесь живут все настройки приложения.

Логика: когда приложение запускается, оно читает .env файл
и создает объект 'config' со всеми необходимыми значениями.

Если какое-то значение из .env будет неправильного типа,
Pydantic сразу выдаст ошибку и подскажет что не так.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    """
    Основной класс настроек.

    BaseSettings = специальный класс Pydantic который:
    1. Автоматически читает .env файл
    2. Валидирует типы (API_PORT должен быть int и т.д.)
    """

    # ==========================================
    # TELEGRAM BOT (панель владельца мастерской)
    # ==========================================
    bot_token: str = ""

    # ==========================================
    # DATABASE
    # ==========================================
    database_url: str = "sqlite+aiosqlite:///./isready.db"

    # ==========================================
    # REDIS (FSM мастера нового заказа)
    # ==========================================
    redis_url: str = ""
    # Пусто = состояния живут в памяти процесса

    # ==========================================
    # API
    # ==========================================
    api_host: str = "0.0.0.0"
    api_port: int = 5000

    # ==========================================
    # УВЕДОМЛЕНИЯ КЛИЕНТАМ
    # ==========================================
    default_shop_name: str = "our shop"
    currency_symbol: str = "₹"
    messaging_base_url: str = "https://wa.me"

    # ==========================================
    # DASHBOARD
    # ==========================================
    recent_orders_limit: int = 5

    # ==========================================
    # ENVIRONMENT
    # ==========================================
    environment: Literal["development", "production"] = "development"
    debug: bool = True

    # Конфигурация Pydantic
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )

    @property
    def async_database_url(self) -> str:
        """Convert standard PostgreSQL URL to asyncpg format"""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if "sslmode=disable" in url:
            url = url.replace("?sslmode=disable", "")
        return url


config = Settings()
