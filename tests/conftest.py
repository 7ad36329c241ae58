"""
Общие фикстуры для тестов контекста отеля.
"""
import io
from datetime import date
from typing import Any, List, Tuple

import pytest
from rich.console import Console

from hotel_booking.hotel.application import HotelApplicationService
from hotel_booking.hotel.domain import Hotel, PricingPolicy, VipPolicy
from hotel_booking.hotel.infrastructure import HotelUnitOfWork, InMemoryEventBus

FIXED_TODAY = date(2024, 6, 1)


class RecordingLogger:
    """Логгер, запоминающий сообщения вместо вывода."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str, dict]] = []

    def info(self, message: str, **kwargs: Any) -> None:
        self.records.append(("INFO", message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self.records.append(("ERROR", message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.records.append(("WARNING", message, kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self.records.append(("DEBUG", message, kwargs))

    def levels(self) -> List[str]:
        return [level for level, _, _ in self.records]


@pytest.fixture
def clock():
    """Часы, всегда возвращающие FIXED_TODAY."""
    return lambda: FIXED_TODAY


@pytest.fixture
def hotel(clock) -> Hotel:
    """Пустой отель с фиксированными часами."""
    return Hotel(
        name="El mirador",
        address="Calle Entornos de Desarrollo 6",
        phone="123456789",
        pricing_policy=PricingPolicy(),
        vip_policy=VipPolicy(clock=clock),
    )


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def uow(hotel: Hotel, logger: RecordingLogger) -> HotelUnitOfWork:
    return HotelUnitOfWork(hotel, event_bus=InMemoryEventBus(logger), logger=logger)


@pytest.fixture
def hotel_service(uow: HotelUnitOfWork, logger: RecordingLogger) -> HotelApplicationService:
    """Сервис приложения поверх пустого отеля."""
    return HotelApplicationService(uow, logger=logger)


@pytest.fixture
def console() -> Console:
    """Консоль rich, пишущая в память."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


def scripted_input(*lines: str):
    """Возвращает функцию чтения строк, которая по окончании строк бросает EOFError."""
    remaining = iter(lines)

    def read_line() -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    return read_line


@pytest.fixture
def make_input():
    return scripted_input
