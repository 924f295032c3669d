"""
Is It Ready? - трекер заказов для ателье.

Структура:
- isready/services/ - жизненный цикл заказа, уведомления, состояние экрана
- isready/bot/      - Telegram бот владельца мастерской
- isready/api/      - JSON API для браузерного дашборда
- config/           - конфигурация (settings.py)
- infrastructure/   - инфраструктура (БД, FSM storage, логирование)
"""

__version__ = "1.0.0"
