"""Инициализация утилит."""

from .text import dashboard_text, order_card_text, order_line, orders_list_text

__all__ = [
    "dashboard_text",
    "order_card_text",
    "order_line",
    "orders_list_text",
]
