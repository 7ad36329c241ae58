"""
Общее ядро (Shared Kernel) для системы управления отелем.

Содержит общие типы данных и утилиты, используемые в контексте отеля.
"""

from .domain import (
    BusinessRuleValidationException,
    DomainEvent,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    # Утилиты
    now,
    one_year_before,
    today,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "DomainEvent",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
    # Утилиты
    "now",
    "today",
    "one_year_before",
]
