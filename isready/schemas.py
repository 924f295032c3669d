# isready/schemas.py
"""
Pydantic модели, которые ходят между слоями.

ORM объекты (infrastructure.database.models) живут только внутри сессии БД.
Наружу отдаём неизменяемые снимки: OrderSnapshot, ShopIdentity.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from infrastructure.database.models import OrderStatus
from isready.errors import ValidationError

# DECIMAL(10,2) в таблице orders
CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


def parse_amount(raw: str, field: str) -> Decimal:
    """
    Число из строки формы. Пусто или не число → 0.
    Округляем до копеек, больше MAX_AMOUNT не принимаем.

    Пример:
        parse_amount("1500", "price")   → Decimal("1500.00")
        parse_amount("abc", "price")    → Decimal("0")
        parse_amount("-5", "price")     → ValidationError
        parse_amount("9.999", "price")  → Decimal("10.00")
    """
    try:
        value = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        return Decimal("0")

    if not value.is_finite():
        return Decimal("0")

    label = field.replace("_", " ").capitalize()
    if value < 0:
        raise ValidationError(f"{label} cannot be negative")
    if value > MAX_AMOUNT:
        raise ValidationError(f"{label} is too large")

    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_delivery_date(raw: Optional[str]) -> Optional[date]:
    """ISO дата YYYY-MM-DD. Пусто → None ("Not set")."""

    raw = (raw or "").strip()
    if not raw:
        return None

    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Delivery date must look like YYYY-MM-DD") from None


# ==========================================
# ФОРМА НОВОГО ЗАКАЗА
# ==========================================

class OrderForm(BaseModel):
    """
    Черновик заказа - всё строками, как ввёл пользователь.
    В БД напрямую никогда не пишется, только через to_fields().
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    customer_name: str = ""
    customer_phone: str = ""
    items: str = ""
    measurements: str = ""
    price: str = ""
    advance_payment: str = ""
    delivery_date: str = ""
    notes: str = ""

    def to_fields(self) -> dict:
        """
        Провалидировать и превратить в поля для OrderRepository.insert().
        Кидает ValidationError если нет имени или телефона.
        """
        customer_name = self.customer_name.strip()
        customer_phone = self.customer_phone.strip()

        if not customer_name or not customer_phone:
            raise ValidationError("Please fill in customer name and phone number")

        return {
            "customer_name": customer_name,
            "customer_phone": customer_phone,
            "items": self.items.strip(),
            "measurements": self.measurements.strip(),
            "price": parse_amount(self.price, "price"),
            "advance_payment": parse_amount(self.advance_payment, "advance_payment"),
            "delivery_date": parse_delivery_date(self.delivery_date),
            "notes": self.notes.strip(),
        }


# ==========================================
# СНИМКИ
# ==========================================

class OrderSnapshot(BaseModel):
    """Копия строки заказа в памяти. Неизменяемая."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    shop_id: int
    customer_name: str
    customer_phone: str
    items: str = ""
    measurements: str = ""
    notes: str = ""
    price: Decimal = Decimal("0")
    advance_payment: Decimal = Decimal("0")
    delivery_date: Optional[date] = None
    status: OrderStatus = OrderStatus.IN_PROGRESS
    created_at: datetime

    @property
    def balance_due(self) -> Decimal:
        # Может быть отрицательным если переплатили
        return self.price - self.advance_payment


class ShopIdentity(BaseModel):
    """Кто вошёл. Движок заказов знает только id и название."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    shop_name: Optional[str] = None
    email: Optional[str] = None
    telegram_id: Optional[int] = None


# ==========================================
# ПРОИЗВОДНЫЕ ДАННЫЕ (не хранятся)
# ==========================================

class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    in_progress: int = 0
    ready: int = 0
    completed: int = 0


class DashboardView(BaseModel):
    """То, что показываем на экране после каждой загрузки заказов."""

    model_config = ConfigDict(frozen=True)

    stats: Stats
    recent: List[OrderSnapshot]
    active: List[OrderSnapshot]
    completed: List[OrderSnapshot]
