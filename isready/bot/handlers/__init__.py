"""
🤖 BOT HANDLERS (обработчики команд)

Порядок важен: auth первым (/start должен работать в любом состоянии),
потом экраны, потом мастер нового заказа.
"""

from aiogram import Router

from .auth import router as auth_router
from .dashboard import router as dashboard_router
from .new_order import router as new_order_router

# ==========================================
# СОЗДАЁМ MAIN ROUTER
# ==========================================

main_router = Router()
main_router.include_router(auth_router)
main_router.include_router(dashboard_router)
main_router.include_router(new_order_router)

__all__ = ["main_router"]
