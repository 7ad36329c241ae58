from datetime import date
from typing import Callable, Optional

from .config import Settings
from .hotel.application import HotelApplicationService
from .hotel.domain import Hotel, PricingPolicy, RoomType, VipPolicy
from .hotel.infrastructure import ConsoleLogger, HotelUnitOfWork, InMemoryEventBus
from .shared_kernel import today

DEMO_ROOMS = [
    (RoomType.SIMPLE, 50),
    (RoomType.DOUBLE, 80),
    (RoomType.SUITE, 120),
    (RoomType.BUNKBED, 200),
    (RoomType.SIMPLE, 65),
    (RoomType.DOUBLE, 100),
    (RoomType.SUITE, 150),
    (RoomType.BUNKBED, 250),
]

DEMO_CUSTOMERS = [
    ("Daniel", "daniel@daniel.com", "12345678A", True),
    ("Adrián", "adrian@adrian.es", "87654321B", False),
]


def seed_demo_data(uow: HotelUnitOfWork) -> None:
    """Регистрирует демонстрационные номера и клиентов."""
    with uow:
        for room_type, base_price in DEMO_ROOMS:
            uow.hotel.register_room(room_type.value, base_price)
        for name, email, tax_id, is_vip in DEMO_CUSTOMERS:
            uow.hotel.register_customer(name, email, tax_id, is_vip)


def bootstrap_app(
    settings: Optional[Settings] = None,
    clock: Callable[[], date] = today,
):
    """Создает и настраивает все компоненты приложения."""
    settings = settings or Settings()
    logger = ConsoleLogger(level=settings.log_level)

    # 1. Создаем агрегат с политиками из настроек
    hotel = Hotel(
        name=settings.name,
        address=settings.address,
        phone=settings.phone,
        pricing_policy=PricingPolicy(settings.stay_length_mode),
        vip_policy=VipPolicy(clock=clock),
    )

    # 2. Создаем Unit of Work и сервис приложения
    uow = HotelUnitOfWork(hotel, event_bus=InMemoryEventBus(logger), logger=logger)
    service = HotelApplicationService(uow, logger=logger)

    if settings.seed_demo_data:
        seed_demo_data(uow)

    return {
        "settings": settings,
        "logger": logger,
        "uow": uow,
        "hotel_service": service,
    }
