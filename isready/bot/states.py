# isready/bot/states.py
"""
📝 STATE MACHINE бота (aiogram FSM).

Мастер нового заказа: по одному полю на шаг, три этапа как в форме:
1/3 - клиент (имя, телефон, что шьём)
2/3 - мерки и деньги
3/3 - дата выдачи и заметки
"""

from aiogram.fsm.state import State, StatesGroup


class NewOrderStates(StatesGroup):
    customer_name = State()
    customer_phone = State()
    items = State()
    measurements = State()
    price = State()
    advance_payment = State()
    delivery_date = State()
    notes = State()


class ExtendDateStates(StatesGroup):
    waiting_date = State()
