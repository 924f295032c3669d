# isready/services/session_gate.py
"""
Вход мастерской.

Для остального кода это просто "кто сейчас вошёл": ShopIdentity или None.
Подписчики on_session_change узнают о входе и выходе.
"""

from typing import Callable, List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models import Shop
from infrastructure.database.repositories import ShopRepository
from isready.errors import NotSignedInError, ValidationError
from isready.schemas import ShopIdentity

logger = structlog.get_logger()

SessionListener = Callable[[int, Optional[ShopIdentity]], None]


class SessionGate:
    """
    Пример:
        gate = SessionGate(session)
        unsubscribe = gate.on_session_change(engine.on_session_change)
        shop = await gate.get_session(telegram_id=123456789)
    """

    def __init__(self, session: AsyncSession):
        self.repo = ShopRepository(session)
        self._listeners: List[SessionListener] = []

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Подписаться. Возвращает функцию отписки."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def get_session(
        self,
        telegram_id: Optional[int] = None,
        token: Optional[str] = None
    ) -> Optional[ShopIdentity]:
        """Текущая сессия по Telegram ID или API токену."""
        if telegram_id is not None:
            shop = await self.repo.get_by_telegram_id(telegram_id)
        elif token:
            shop = await self.repo.get_by_token(token)
        else:
            return None

        if shop is None or not shop.signed_in:
            return None

        return ShopIdentity.model_validate(shop)

    async def sign_up(
        self,
        shop_name: str,
        telegram_id: Optional[int] = None,
        email: Optional[str] = None
    ) -> Shop:
        """
        Зарегистрировать мастерскую. Возвращает строку целиком,
        чтобы API мог показать api_token один раз.
        """
        shop_name = (shop_name or "").strip()
        if not shop_name:
            raise ValidationError("Please enter your shop name")

        if telegram_id is not None and await self.repo.get_by_telegram_id(telegram_id):
            raise ValidationError("This account already has a shop, use /start to sign in")

        shop = await self.repo.create(shop_name, telegram_id=telegram_id, email=email)
        self._emit(shop.id, ShopIdentity.model_validate(shop))

        return shop

    async def sign_in(self, telegram_id: int) -> ShopIdentity:
        shop = await self.repo.get_by_telegram_id(telegram_id)
        if shop is None:
            raise NotSignedInError("No shop registered for this account")

        if not shop.signed_in:
            await self.repo.set_signed_in(shop.id, True)

        identity = ShopIdentity.model_validate(shop)
        self._emit(shop.id, identity)

        return identity

    async def sign_out(self, shop_id: int) -> None:
        await self.repo.set_signed_in(shop_id, False)
        self._emit(shop_id, None)

    def _emit(self, shop_id: int, identity: Optional[ShopIdentity]) -> None:
        logger.info("session_event", shop_id=shop_id, signed_in=identity is not None)

        for listener in list(self._listeners):
            listener(shop_id, identity)
