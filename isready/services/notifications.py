# isready/services/notifications.py
"""
Уведомления клиентам через WhatsApp.

Сами мы ничего не отправляем: собираем текст, делаем ссылку
https://wa.me/<цифры>?text=<текст> и отдаём её "хосту" (кнопка в Telegram,
поле в ответе API). Владелец мастерской жмёт "Отправить" уже в WhatsApp.
Подтверждения доставки нет и не будет.
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import quote

import structlog

from config.settings import config
from isready.schemas import OrderSnapshot

logger = structlog.get_logger()

# Символы, которые encodeURIComponent оставляет как есть
_URI_COMPONENT_SAFE = "-_.!~*'()"

_NON_DIGITS = re.compile(r"\D")


class MessageKind(str, Enum):
    CREATED = "created"
    READY = "ready"
    EXTENDED = "extended"


@dataclass(frozen=True)
class MessageContext:
    """Всё, чего нет в самом заказе."""

    shop_name: Optional[str] = None
    new_delivery_date: Optional[date] = None


# ==========================================
# ФОРМАТИРОВАНИЕ
# ==========================================

def format_money(amount: Decimal) -> str:
    """
    ₹1,500 или ₹1,500.50

    Пример:
        format_money(Decimal("1500.00"))  → "₹1,500"
        format_money(Decimal("-200"))     → "-₹200"
    """
    sign = "-" if amount < 0 else ""
    amount = abs(amount)

    if amount == amount.to_integral_value():
        digits = f"{amount:,.0f}"
    else:
        digits = f"{amount:,.2f}"

    return f"{sign}{config.currency_symbol}{digits}"


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else "Not set"


# ==========================================
# ШАБЛОНЫ
# ==========================================

def compose_message(kind: MessageKind, order: OrderSnapshot, context: MessageContext) -> str:
    """
    Текст сообщения клиенту.

    Для READY остаток считается из переданного снимка заказа:
    price - advance_payment.
    """
    shop_name = context.shop_name or config.default_shop_name

    if kind == MessageKind.CREATED:
        return (
            f"Hello {order.customer_name}! ✨\n\n"
            f"Your order has been received at {shop_name}.\n\n"
            f"📦 Items: {order.items}\n"
            f"📅 Expected Delivery: {format_date(order.delivery_date)}\n"
            f"💰 Total: {format_money(order.price)}\n"
            f"✅ Advance Paid: {format_money(order.advance_payment)}\n\n"
            f"We'll notify you when your order is ready for pickup. Thank you! 🙏"
        )

    if kind == MessageKind.READY:
        return (
            f"Good news {order.customer_name}! 🎉\n\n"
            f"Your order is now ready for pickup at {shop_name}! ✅\n\n"
            f"📦 Items: {order.items}\n"
            f"💰 Balance Due: {format_money(order.balance_due)}\n\n"
            f"Please collect it at your earliest convenience. "
            f"We're open and waiting for you! 😊"
        )

    if kind == MessageKind.EXTENDED:
        return (
            f"Hello {order.customer_name},\n\n"
            f"We apologize for the delay. Your order at {shop_name} needs a little "
            f"more time to ensure perfect quality. 🎯\n\n"
            f"📦 Items: {order.items}\n"
            f"📅 New Delivery Date: {format_date(context.new_delivery_date)}\n\n"
            f"We appreciate your patience and promise it will be worth the wait! "
            f"Thank you for understanding. 🙏"
        )

    raise ValueError(f"Unknown message kind: {kind}")


def phone_digits(phone: str) -> str:
    """"+91 98765-43210" → "919876543210" """
    return _NON_DIGITS.sub("", phone)


def build_handoff_uri(phone: str, message: str) -> str:
    """
    Ссылка, открывающая WhatsApp с готовым сообщением.

    Пример:
        build_handoff_uri("+91 98765-43210", "Hi")
        → "https://wa.me/919876543210?text=Hi"
    """
    encoded = quote(message, safe=_URI_COMPONENT_SAFE)
    return f"{config.messaging_base_url}/{phone_digits(phone)}?text={encoded}"


# ==========================================
# ОТПРАВКА (передача хосту)
# ==========================================

Opener = Callable[[str], None]


class HandoffCollector:
    """
    Opener, который просто запоминает ссылки.

    Бот превращает их в кнопки, API отдаёт в ответе,
    а открывает их уже клиентское приложение.
    """

    def __init__(self):
        self.uris: List[str] = []

    def __call__(self, uri: str) -> None:
        self.uris.append(uri)

    @property
    def last(self) -> Optional[str]:
        return self.uris[-1] if self.uris else None


class NotificationDispatcher:
    """Собирает сообщение и отдаёт ссылку opener'у. Ничего не ждёт."""

    def __init__(self, opener: Opener):
        self.opener = opener

    def dispatch(self, uri: str) -> None:
        """Односторонняя команда хосту: открой ссылку."""
        try:
            self.opener(uri)
        except Exception as e:
            # Заказ уже сохранён, неудачная ссылка это не повод падать
            logger.error("handoff_failed", error=str(e), error_type=type(e).__name__)

    def notify(
        self,
        kind: MessageKind,
        order: OrderSnapshot,
        context: MessageContext
    ) -> Optional[str]:
        """
        compose_message → build_handoff_uri → dispatch.

        Если в телефоне нет ни одной цифры, ссылка получилась бы без
        получателя: не отправляем и возвращаем None.
        """
        if not phone_digits(order.customer_phone):
            logger.warning("handoff_skipped_no_phone_digits", order_id=order.id, kind=kind.value)
            return None

        message = compose_message(kind, order, context)
        uri = build_handoff_uri(order.customer_phone, message)

        self.dispatch(uri)

        logger.info("customer_notified", order_id=order.id, kind=kind.value)

        return uri
