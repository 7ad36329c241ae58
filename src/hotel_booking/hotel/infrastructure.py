"""
Инфраструктурный слой контекста отеля.

Содержит реализации портов: консольный логгер, шину событий в памяти
и единицу работы, которая хранит агрегат отеля в памяти процесса.
"""

import json
import sys
from typing import Any, Dict, List, Optional, TextIO, Type

from ..shared_kernel import DomainEvent
from . import interfaces as ports
from .domain import Hotel

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class ConsoleLogger(ports.ILogger):
    """Простая реализация логгера, выводящая сообщения в консоль.

    INFO и DEBUG пишутся в stdout, WARNING и ERROR - в stderr.
    Сообщения ниже ``level`` отбрасываются.
    """

    def __init__(
        self,
        level: str = "INFO",
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._threshold = LOG_LEVELS[level.upper()]
        self._stdout = stdout
        self._stderr = stderr

    def _write(self, level: str, message: str, stream: TextIO, **kwargs: Any) -> None:
        if LOG_LEVELS[level] < self._threshold:
            return
        print(f"[{level}] {message}", file=stream, flush=True)
        if kwargs:
            context = json.dumps(kwargs, default=str, indent=2, ensure_ascii=False)
            print("  Context:", context, file=stream, flush=True)

    def info(self, message: str, **kwargs: Any) -> None:
        self._write("INFO", message, self._stdout or sys.stdout, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._write("DEBUG", message, self._stdout or sys.stdout, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._write("WARNING", message, self._stderr or sys.stderr, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._write("ERROR", message, self._stderr or sys.stderr, **kwargs)


class InMemoryEventBus(ports.IEventBus):
    """Реализация шины событий в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], list] = {}
        self._logger = logger or ConsoleLogger()

    def publish(self, event: DomainEvent) -> None:
        """Публикует событие."""
        event_type = type(event)
        if event_type not in self._subscribers:
            self._logger.debug(f"No subscribers for event type {event_type.__name__}")
            return

        self._logger.debug(
            f"Publishing event: {event_type.__name__}", event=event.model_dump()
        )

        for handler in self._subscribers[event_type]:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(),
                )

    def subscribe(self, event_type: Type[DomainEvent], handler) -> None:
        """Подписывает обработчик на события указанного типа."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)
        self._logger.debug(f"Subscribed handler to {event_type.__name__} events")


class HotelUnitOfWork(ports.IHotelUnitOfWork):
    """Единица работы для контекста отеля.

    Данные живут только в памяти процесса. При фиксации накопленные
    агрегатом события публикуются в шину, при откате - отбрасываются.
    """

    def __init__(
        self,
        hotel: Hotel,
        event_bus: Optional[ports.IEventBus] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._hotel = hotel
        self._logger = logger or ConsoleLogger()
        self._event_bus = event_bus or InMemoryEventBus(self._logger)
        self._published: List[DomainEvent] = []

    @property
    def hotel(self) -> Hotel:
        return self._hotel

    @property
    def event_bus(self) -> ports.IEventBus:
        return self._event_bus

    @property
    def published_events(self) -> List[DomainEvent]:
        """События, опубликованные за время жизни единицы работы."""
        return list(self._published)

    def commit(self) -> None:
        """Фиксирует изменения и публикует события агрегата."""
        events = self._hotel.pull_domain_events()
        for event in events:
            self._event_bus.publish(event)
        self._published.extend(events)
        self._logger.debug("HotelUnitOfWork committed", events=len(events))

    def rollback(self) -> None:
        """Отбрасывает неопубликованные события."""
        discarded = self._hotel.pull_domain_events()
        self._logger.info("HotelUnitOfWork rolled back", discarded=len(discarded))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False  # Пробрасываем исключение дальше, если оно было
