# isready/services/lifecycle.py
"""
Жизненный цикл заказа.

    IN_PROGRESS ──mark_ready──▶ READY ──mark_completed──▶ COMPLETED

Назад дороги нет, IN_PROGRESS → COMPLETED напрямую тоже нельзя.
Дату выдачи можно перенести пока заказ IN_PROGRESS.

Важно про уведомления: текст собирается из снимка заказа, который
уже лежит в памяти (state.orders), ДО записи в БД. Перечитывать заказ
перед отправкой мы не стали: это лишний запрос, а расхождение бывает
только если заказ меняли с другого устройства.
"""

from datetime import date
from typing import Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import OrderStatus
from infrastructure.database.repositories import OrderRepository
from isready.errors import (
    InvalidTransitionError,
    NotFoundError,
    NotSignedInError,
    StoreError,
    ValidationError,
)
from isready.schemas import OrderForm, OrderSnapshot, ShopIdentity, parse_delivery_date
from isready.services.notifications import (
    MessageContext,
    MessageKind,
    NotificationDispatcher,
    Opener,
)
from isready.services.session_gate import SessionGate
from isready.services.state import (
    AppState,
    Event,
    MutationSucceeded,
    OperationFailed,
    OrdersLoaded,
    SessionChanged,
    reduce,
)

logger = structlog.get_logger()


# Из какого статуса в какой можно перейти
ALLOWED_TRANSITIONS = {
    OrderStatus.IN_PROGRESS: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


class OrderLifecycleEngine:
    """
    Все действия с заказами одной мастерской.

    Пример:
        engine = OrderLifecycleEngine(OrderRepository(session), NotificationDispatcher(opener))
        engine.on_session_change(shop.id, shop)
        await engine.sync()
        await engine.mark_ready(42)
    """

    def __init__(
        self,
        store: OrderRepository,
        notifier: NotificationDispatcher,
        state: Optional[AppState] = None
    ):
        self.store = store
        self.notifier = notifier
        self.state = state or AppState()

    # ==========================================
    # ЦИКЛ СОСТОЯНИЯ
    # ==========================================

    def apply(self, event: Event) -> AppState:
        self.state = reduce(self.state, event)
        return self.state

    def on_session_change(self, shop_id: int, shop: Optional[ShopIdentity]) -> None:
        """
        Слушатель SessionGate.on_session_change.
        События чужих мастерских игнорируем.
        """
        current = self.state.shop
        if current is not None and current.id != shop_id:
            return
        if current is None and shop is None:
            return

        self.apply(SessionChanged(shop))
        logger.info("session_changed", shop_id=shop_id, signed_in=shop is not None)

    async def sync(self) -> AppState:
        """Если после записи ждёт обновление - перечитать заказы."""
        if self.state.shop is not None and self.state.pending_refresh:
            await self.refresh()
        return self.state

    async def refresh(self) -> AppState:
        """Загрузить все заказы мастерской заново."""
        shop = self._require_shop()

        try:
            rows = await self.store.select_all(shop.id)
        except StoreError as e:
            self.apply(OperationFailed(e.message))
            raise

        orders = tuple(OrderSnapshot.model_validate(row) for row in rows)
        self.apply(OrdersLoaded(orders))

        logger.info("orders_refreshed", shop_id=shop.id, count=len(orders))

        return self.state

    # ==========================================
    # ДЕЙСТВИЯ
    # ==========================================

    async def create_order(self, form: OrderForm) -> OrderSnapshot:
        """
        Создать заказ в статусе IN_PROGRESS и отправить клиенту
        "заказ принят". Без имени или телефона в БД ничего не пишем.
        """
        shop = self._require_shop()

        try:
            fields = form.to_fields()
        except ValidationError as e:
            self.apply(OperationFailed(e.message))
            raise

        row = await self._write(
            self.store.insert(shop.id, status=OrderStatus.IN_PROGRESS, **fields)
        )
        created = OrderSnapshot.model_validate(row)
        self.apply(MutationSucceeded(created.id))

        logger.info("order_created", shop_id=shop.id, order_id=created.id)

        self.notifier.notify(MessageKind.CREATED, created, self._context())
        await self._refresh_after_write()

        return created

    async def advance_status(
        self,
        order_id: int,
        target: Union[OrderStatus, str]
    ) -> OrderSnapshot:
        """
        Перевести заказ в следующий статус.

        Заказ ищем в уже загруженном списке, не в БД.
        READY → сообщение "можно забирать", COMPLETED → без сообщения.
        """
        shop = self._require_shop()
        order = self._find(order_id)
        try:
            target = OrderStatus(target)
        except ValueError:
            raise ValidationError(f"Unknown status: {target}") from None

        if ALLOWED_TRANSITIONS.get(order.status) != target:
            message = f"Order cannot move from {order.status.value} to {target.value}"
            self.apply(OperationFailed(message))
            raise InvalidTransitionError(message)

        await self._write(self.store.update_fields(shop.id, order.id, status=target))
        self.apply(MutationSucceeded(order.id))

        logger.info(
            "order_status_changed",
            shop_id=shop.id,
            order_id=order.id,
            old_status=order.status.value,
            new_status=target.value
        )

        if target == OrderStatus.READY:
            # Снимок до записи: price/advance_payment из памяти
            self.notifier.notify(MessageKind.READY, order, self._context())

        await self._refresh_after_write()

        return self._updated(order, status=target)

    async def mark_ready(self, order_id: int) -> OrderSnapshot:
        return await self.advance_status(order_id, OrderStatus.READY)

    async def mark_completed(self, order_id: int) -> OrderSnapshot:
        return await self.advance_status(order_id, OrderStatus.COMPLETED)

    async def extend_delivery_date(
        self,
        order_id: int,
        new_date: Union[date, str, None]
    ) -> OrderSnapshot:
        """
        Перенести дату выдачи и извиниться перед клиентом.
        Пустая дата = ничего не делаем (ни записи, ни сообщения).
        """
        shop = self._require_shop()

        try:
            parsed = new_date if isinstance(new_date, date) else parse_delivery_date(new_date)
            if parsed is None:
                raise ValidationError("Please select a new delivery date")
        except ValidationError as e:
            self.apply(OperationFailed(e.message))
            raise

        order = self._find(order_id)

        if order.status != OrderStatus.IN_PROGRESS:
            message = f"Delivery date can only be changed while the order is {OrderStatus.IN_PROGRESS.value}"
            self.apply(OperationFailed(message))
            raise InvalidTransitionError(message)

        await self._write(self.store.update_fields(shop.id, order.id, delivery_date=parsed))
        self.apply(MutationSucceeded(order.id))

        logger.info(
            "delivery_date_extended",
            shop_id=shop.id,
            order_id=order.id,
            delivery_date=parsed.isoformat()
        )

        self.notifier.notify(
            MessageKind.EXTENDED,
            order,
            self._context(new_delivery_date=parsed)
        )
        await self._refresh_after_write()

        return self._updated(order, delivery_date=parsed)

    # ==========================================
    # ВСПОМОГАТЕЛЬНОЕ
    # ==========================================

    def get_order(self, order_id: int) -> OrderSnapshot:
        """Заказ из загруженного списка (для карточки заказа)."""
        return self._find(order_id)

    def _require_shop(self) -> ShopIdentity:
        if self.state.shop is None:
            raise NotSignedInError("Please sign in first")
        return self.state.shop

    def _find(self, order_id: int) -> OrderSnapshot:
        for order in self.state.orders:
            if order.id == order_id:
                return order

        logger.warning("order_not_in_snapshot", order_id=order_id)
        raise NotFoundError(f"Order {order_id} not found")

    def _updated(self, order: OrderSnapshot, **changes) -> OrderSnapshot:
        """Свежая версия из перечитанного списка, а если не вышло - снимок с изменениями."""
        if not self.state.pending_refresh:
            for fresh in self.state.orders:
                if fresh.id == order.id:
                    return fresh
        return order.model_copy(update=changes)

    def _context(self, new_delivery_date: Optional[date] = None) -> MessageContext:
        return MessageContext(
            shop_name=self.state.shop.shop_name if self.state.shop else None,
            new_delivery_date=new_delivery_date,
        )

    async def _write(self, operation):
        try:
            return await operation
        except StoreError as e:
            self.apply(OperationFailed(e.message))
            raise

    async def _refresh_after_write(self) -> None:
        # Запись уже прошла: если перечитать не вышло, остаётся pending_refresh
        try:
            await self.sync()
        except StoreError as e:
            logger.error("refresh_after_write_failed", error=e.message)


async def open_dashboard(
    session: AsyncSession,
    shop: ShopIdentity,
    opener: Opener,
    gate: Optional[SessionGate] = None
) -> OrderLifecycleEngine:
    """
    Движок для одного запроса/апдейта: сессия входит, заказы загружены.
    С gate движок подписан на вход/выход этого же апдейта.

    Пример:
        collector = HandoffCollector()
        engine = await open_dashboard(session, shop, collector)
        await engine.mark_ready(42)
        collector.last  # ссылка wa.me
    """
    engine = OrderLifecycleEngine(OrderRepository(session), NotificationDispatcher(opener))
    engine.on_session_change(shop.id, shop)
    if gate is not None:
        gate.on_session_change(engine.on_session_change)

    await engine.sync()
    return engine
