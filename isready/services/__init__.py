"""
Бизнес-логика: заказы, уведомления, состояние экрана.
"""
