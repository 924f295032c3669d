# isready/bot/utils/text.py
"""Тексты сообщений бота (HTML)."""

from html import escape
from typing import Sequence

from infrastructure.database.models import OrderStatus
from isready.schemas import OrderSnapshot, ShopIdentity, Stats
from isready.services.notifications import format_date, format_money

STATUS_ICONS = {
    OrderStatus.IN_PROGRESS: "🟠",
    OrderStatus.READY: "🟢",
    OrderStatus.COMPLETED: "🔵",
}


def order_line(order: OrderSnapshot) -> str:
    """Одна строка в списке заказов."""
    items = f" · {escape(order.items)}" if order.items else ""
    return f"{STATUS_ICONS[order.status]} <b>{escape(order.customer_name)}</b>{items}"


def order_card_text(order: OrderSnapshot) -> str:
    """Карточка заказа со всеми полями."""

    lines = [
        f"{STATUS_ICONS[order.status]} <b>{order.status.value}</b>",
        "",
        f"👤 <b>{escape(order.customer_name)}</b>",
        f"📞 {escape(order.customer_phone)}",
        f"📦 Items: {escape(order.items) or '-'}",
        f"📏 Measurements: {escape(order.measurements) or '-'}",
        f"💰 Price: {format_money(order.price)}",
        f"✅ Advance: {format_money(order.advance_payment)}",
        f"💳 Balance due: {format_money(order.balance_due)}",
        f"📅 Delivery: {format_date(order.delivery_date)}",
    ]

    if order.notes:
        lines.append(f"📝 {escape(order.notes)}")

    lines.append(f"⏰ Created {order.created_at.strftime('%d.%m.%Y %H:%M')}")

    return "\n".join(lines)


def dashboard_text(shop: ShopIdentity, stats: Stats, recent: Sequence[OrderSnapshot]) -> str:
    shop_name = escape(shop.shop_name or "Shop")

    text = (
        f"🧵 <b>{shop_name}</b>\n\n"
        f"🟠 In Progress: <b>{stats.in_progress}</b>\n"
        f"🟢 Ready for Pickup: <b>{stats.ready}</b>\n"
        f"🔵 Completed: <b>{stats.completed}</b>\n\n"
        f"<b>Recent Orders</b>\n"
    )

    if not recent:
        return text + "No orders yet. Create your first order!"

    return text + "\n".join(order_line(o) for o in recent)


def orders_list_text(title: str, orders: Sequence[OrderSnapshot], empty: str) -> str:
    if not orders:
        return f"<b>{title}</b>\n\n{empty}"

    return f"<b>{title}</b> ({len(orders)})\n\n" + "\n".join(order_line(o) for o in orders)
