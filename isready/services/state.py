# isready/services/state.py
"""
Состояние экрана владельца мастерской.

Один цикл в одну сторону:
    хранилище → событие → reduce() → новое AppState → view_model

Состояние никогда не меняется на месте: reduce() возвращает новый объект.
Успешная запись не трогает список заказов, а только ставит
pending_refresh=True. Список обновляется одной дорогой: OrdersLoaded.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from isready.schemas import OrderSnapshot, ShopIdentity, Stats
from isready.services.view_model import compute_stats


@dataclass(frozen=True)
class AppState:
    shop: Optional[ShopIdentity] = None
    orders: Tuple[OrderSnapshot, ...] = ()
    stats: Stats = Stats()
    pending_refresh: bool = False
    error: Optional[str] = None


# ==========================================
# СОБЫТИЯ
# ==========================================

@dataclass(frozen=True)
class SessionChanged:
    """Вход или выход. shop=None = вышли."""
    shop: Optional[ShopIdentity]


@dataclass(frozen=True)
class OrdersLoaded:
    orders: Tuple[OrderSnapshot, ...]


@dataclass(frozen=True)
class MutationSucceeded:
    order_id: int


@dataclass(frozen=True)
class OperationFailed:
    message: str


Event = Union[SessionChanged, OrdersLoaded, MutationSucceeded, OperationFailed]


def reduce(state: AppState, event: Event) -> AppState:
    """Чистая функция: старое состояние + событие → новое состояние."""

    if isinstance(event, SessionChanged):
        if event.shop is None:
            return AppState()
        if state.shop is not None and state.shop.id == event.shop.id:
            return replace(state, shop=event.shop)
        # Новая мастерская: чужие заказы не показываем, грузим свои
        return AppState(shop=event.shop, pending_refresh=True)

    if isinstance(event, OrdersLoaded):
        return replace(
            state,
            orders=tuple(event.orders),
            stats=compute_stats(event.orders),
            pending_refresh=False,
            error=None,
        )

    if isinstance(event, MutationSucceeded):
        return replace(state, pending_refresh=True, error=None)

    if isinstance(event, OperationFailed):
        return replace(state, error=event.message)

    raise TypeError(f"Unknown event: {event!r}")
