"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# Идентификаторы сущностей отеля - последовательные целые числа
EntityId = int


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=lambda: now())

    @property
    def event_type(self) -> str:
        return type(self).__name__


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время (UTC)."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Возвращает текущую дату."""
    return date.today()


def one_year_before(day: date) -> date:
    """Та же дата годом ранее; 29 февраля превращается в 28 февраля."""
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)
