"""
Интерфейсы (порты) для контекста отеля.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Type, TypeVar

from ..shared_kernel import DomainEvent
from .domain import Hotel

T_Event = TypeVar("T_Event", bound=DomainEvent)


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], None]
    ) -> None: ...


class IHotelUnitOfWork(Protocol):
    """Интерфейс Unit of Work для контекста отеля."""

    @property
    def hotel(self) -> Hotel: ...
    @property
    def event_bus(self) -> IEventBus: ...

    def __enter__(self) -> IHotelUnitOfWork: ...
    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
