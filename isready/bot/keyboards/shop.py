# isready/bot/keyboards/shop.py
"""
Клавиатуры владельца мастерской.

Все кнопки inline: callback_data вида "order:ready:42".
Ссылка на WhatsApp - обычная URL-кнопка, её открывает сам Telegram.
"""

from typing import Optional, Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from infrastructure.database.models import OrderStatus
from isready.schemas import OrderSnapshot


def nav_row() -> list[InlineKeyboardButton]:
    return [
        InlineKeyboardButton(text="🏠 Dashboard", callback_data="view:dashboard"),
        InlineKeyboardButton(text="📋 Orders", callback_data="view:orders"),
        InlineKeyboardButton(text="🗂 History", callback_data="view:history"),
    ]


def dashboard_keyboard(recent: Sequence[OrderSnapshot]) -> InlineKeyboardMarkup:
    """Главный экран: новый заказ, последние заказы, навигация."""

    buttons = [[InlineKeyboardButton(text="➕ New Order", callback_data="new_order")]]

    for order in recent:
        buttons.append([
            InlineKeyboardButton(
                text=f"{order.customer_name} · {order.status.value}",
                callback_data=f"order:view:{order.id}"
            )
        ])

    buttons.append(nav_row())

    return InlineKeyboardMarkup(inline_keyboard=buttons)


def order_actions(order: OrderSnapshot) -> list[InlineKeyboardButton]:
    """
    Кнопки действий по статусу:
    - In Progress: "Готов" и "Перенести дату"
    - Ready: "Выдан"
    - Completed: ничего
    """
    if order.status == OrderStatus.IN_PROGRESS:
        return [
            InlineKeyboardButton(text="✅ Ready", callback_data=f"order:ready:{order.id}"),
            InlineKeyboardButton(text="📅 Extend", callback_data=f"order:extend:{order.id}"),
        ]

    if order.status == OrderStatus.READY:
        return [
            InlineKeyboardButton(text="🏁 Completed", callback_data=f"order:done:{order.id}"),
        ]

    return []


def orders_keyboard(orders: Sequence[OrderSnapshot]) -> InlineKeyboardMarkup:
    """Список заказов: имя клиента → карточка, рядом действия."""

    buttons = []

    for order in orders:
        buttons.append([
            InlineKeyboardButton(
                text=f"👁 {order.customer_name}",
                callback_data=f"order:view:{order.id}"
            ),
            *order_actions(order),
        ])

    buttons.append(nav_row())

    return InlineKeyboardMarkup(inline_keyboard=buttons)


def order_detail_keyboard(order: OrderSnapshot) -> InlineKeyboardMarkup:
    buttons = []

    actions = order_actions(order)
    if actions:
        buttons.append(actions)

    buttons.append(nav_row())

    return InlineKeyboardMarkup(inline_keyboard=buttons)


def handoff_keyboard(uri: Optional[str]) -> InlineKeyboardMarkup:
    """Кнопка "Отправить в WhatsApp" + навигация."""

    buttons = []

    if uri:
        buttons.append([InlineKeyboardButton(text="📲 Send via WhatsApp", url=uri)])

    buttons.append(nav_row())

    return InlineKeyboardMarkup(inline_keyboard=buttons)


def wizard_keyboard(optional: bool) -> InlineKeyboardMarkup:
    """Под вопросом мастера: "Пропустить" (для необязательных) и "Отмена"."""

    row = []
    if optional:
        row.append(InlineKeyboardButton(text="⏭ Skip", callback_data="wizard:skip"))
    row.append(InlineKeyboardButton(text="✖️ Cancel", callback_data="wizard:cancel"))

    return InlineKeyboardMarkup(inline_keyboard=[row])
