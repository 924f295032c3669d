# isready/api/dependencies.py
"""FastAPI dependencies: сессия БД и текущая мастерская."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.base import get_db_session
from isready.errors import NotSignedInError
from isready.schemas import ShopIdentity
from isready.services.session_gate import SessionGate


async def get_session_gate(session: AsyncSession = Depends(get_db_session)) -> SessionGate:
    return SessionGate(session)


async def get_current_shop(
    x_shop_token: str = Header(default=""),
    gate: SessionGate = Depends(get_session_gate),
) -> ShopIdentity:
    """Мастерская по заголовку X-Shop-Token. Нет сессии → 401."""

    shop = await gate.get_session(token=x_shop_token)
    if shop is None:
        raise NotSignedInError("Please sign in first")

    return shop
