"""
🔄 MIDDLEWARE (перехватчики)

Срабатывают для КАЖДОГО сообщения и callback'а:
- LoggingMiddleware: пишет в лог кто и что прислал
- DatabaseMiddleware: открывает сессию БД на время обработки
"""

from .database import DatabaseMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
    "DatabaseMiddleware",
]
