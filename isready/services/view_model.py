# isready/services/view_model.py
"""
Производные данные для экрана.

Всё считается заново из полного списка заказов после каждой загрузки.
Порядок списка (новые сверху) сохраняется во всех фильтрах.
"""

from typing import Optional, Sequence

from config.settings import config
from infrastructure.database.models import OrderStatus
from isready.schemas import DashboardView, OrderSnapshot, Stats


def compute_stats(orders: Sequence[OrderSnapshot]) -> Stats:
    """Сколько заказов в каждом статусе."""

    return Stats(
        in_progress=len([o for o in orders if o.status == OrderStatus.IN_PROGRESS]),
        ready=len([o for o in orders if o.status == OrderStatus.READY]),
        completed=len([o for o in orders if o.status == OrderStatus.COMPLETED]),
    )


def filter_active(orders: Sequence[OrderSnapshot]) -> list[OrderSnapshot]:
    return [o for o in orders if o.status != OrderStatus.COMPLETED]


def filter_completed(orders: Sequence[OrderSnapshot]) -> list[OrderSnapshot]:
    return [o for o in orders if o.status == OrderStatus.COMPLETED]


def search(orders: Sequence[OrderSnapshot], query: str) -> list[OrderSnapshot]:
    """
    Поиск по имени (без учёта регистра) ИЛИ по телефону (как есть).

    Пример:
        search(orders, "jo")   → John Doe
        search(orders, "555")  → все у кого в телефоне есть 555
        search(orders, "")     → все
    """
    needle = query.lower()

    return [
        o for o in orders
        if needle in o.customer_name.lower() or query in o.customer_phone
    ]


def recent_orders(orders: Sequence[OrderSnapshot], limit: Optional[int] = None) -> list[OrderSnapshot]:
    """Последние N заказов для главного экрана."""

    limit = config.recent_orders_limit if limit is None else limit
    return list(orders[:limit])


def build_view(orders: Sequence[OrderSnapshot], query: str = "") -> DashboardView:
    """
    Всё что нужно экрану одним объектом.

    Поиск применяется только к активным заказам, как на вкладке "Orders".
    """
    return DashboardView(
        stats=compute_stats(orders),
        recent=recent_orders(orders),
        active=filter_active(search(orders, query)),
        completed=filter_completed(orders),
    )
