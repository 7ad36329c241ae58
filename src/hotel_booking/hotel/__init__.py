"""
Модуль контекста отеля (Hotel Context).

Отвечает за управление номерами, клиентами и бронированиями, включая:
- Регистрацию номеров и клиентов
- Поиск свободных номеров и бронирование
- Расчет стоимости и повышение клиентов до VIP
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
