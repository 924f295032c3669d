"""Инициализация клавиатур."""

from .shop import (
    dashboard_keyboard,
    handoff_keyboard,
    order_detail_keyboard,
    orders_keyboard,
    wizard_keyboard,
)

__all__ = [
    "dashboard_keyboard",
    "handoff_keyboard",
    "order_detail_keyboard",
    "orders_keyboard",
    "wizard_keyboard",
]
