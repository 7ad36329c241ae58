"""
Доменная модель контекста отеля.

Содержит сущности (клиент, номер, бронирование), доменные политики
(ценообразование, VIP-статус), доменные события, исключения
и корень агрегата - отель.
"""

import math
import re
from datetime import date
from enum import Enum
from typing import Callable, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..shared_kernel import (
    BusinessRuleValidationException,
    DomainEvent,
    DomainException,
    EntityId,
    one_year_before,
    today,
)

NAME_MIN_LENGTH = 3
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
TAX_ID_PATTERN = re.compile(r"[0-9]{8}[A-Z]")


# ===================================================================
# Исключения
# ===================================================================


class CustomerValidationError(DomainException):
    """Некорректные данные клиента (имя, email или DNI)."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class RoomAlreadyReservedError(BusinessRuleValidationException):
    """Попытка зарезервировать уже занятый номер."""

    def __init__(self, room_number: EntityId):
        super().__init__(f"Номер #{room_number} уже зарезервирован")
        self.room_number = room_number


class ReservationErrorKind(Enum):
    """Причины отказа в бронировании.

    Значения совпадают с кодами ошибок старого интерфейса
    (номер комнаты >= 1 при успехе, отрицательный код при отказе).
    """

    ROOM_TYPE_UNAVAILABLE = -1
    INVALID_DATES = -2
    CUSTOMER_NOT_FOUND = -3
    NO_ROOMS = -4

    @property
    def code(self) -> int:
        return self.value


class ReservationError(DomainException):
    """Базовое исключение для отказов в бронировании.

    Абстрактный класс: выбрасываются только подклассы, задающие ``kind``.
    """

    kind: ClassVar[ReservationErrorKind]

    def __init__(self, message: str):
        if type(self) is ReservationError:
            raise TypeError("ReservationError - абстрактный класс, используйте подкласс")
        super().__init__(message)

    @property
    def code(self) -> int:
        return self.kind.code


class NoRoomsError(ReservationError):
    """В отеле нет ни одного номера."""

    kind = ReservationErrorKind.NO_ROOMS

    def __init__(self) -> None:
        super().__init__("В отеле нет зарегистрированных номеров")


class CustomerNotFoundError(ReservationError):
    """Клиент с указанным id не существует."""

    kind = ReservationErrorKind.CUSTOMER_NOT_FOUND

    def __init__(self, customer_id: EntityId):
        super().__init__(f"Клиент с id {customer_id} не существует")
        self.customer_id = customer_id


class InvalidDatesError(ReservationError):
    """Дата заезда не раньше даты выезда."""

    kind = ReservationErrorKind.INVALID_DATES

    def __init__(self, check_in: date, check_out: date):
        super().__init__(
            f"Дата заезда ({check_in}) должна быть раньше даты выезда ({check_out})"
        )
        self.check_in = check_in
        self.check_out = check_out


class RoomTypeUnavailableError(ReservationError):
    """Нет свободных номеров запрошенного типа."""

    kind = ReservationErrorKind.ROOM_TYPE_UNAVAILABLE

    def __init__(self, room_type: str):
        super().__init__(f"Нет свободных номеров типа {room_type}")
        self.room_type = room_type


# ===================================================================
# Проверки данных клиента
# ===================================================================


def validate_name(name: Optional[str]) -> str:
    """Имя не пустое и содержит не меньше трех символов без учета пробелов."""
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN_LENGTH:
        raise CustomerValidationError("name", "Имя клиента некорректно")
    return name


def validate_email(email: Optional[str]) -> str:
    """Email в формате пример@домен.com."""
    if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
        raise CustomerValidationError("email", "Email клиента некорректен")
    return email


def validate_tax_id(tax_id: Optional[str]) -> str:
    """DNI: восемь цифр и заглавная буква."""
    if not isinstance(tax_id, str) or not TAX_ID_PATTERN.fullmatch(tax_id):
        raise CustomerValidationError("tax_id", "DNI клиента некорректен")
    return tax_id


# ===================================================================
# Сущности
# ===================================================================


class RoomType(str, Enum):
    """Типы номеров демонстрационного отеля.

    Список не закрыт: номер можно зарегистрировать с любым типом.
    """

    SIMPLE = "SIMPLE"
    DOUBLE = "DOUBLE"
    SUITE = "SUITE"
    BUNKBED = "BUNKBED"


class Customer(BaseModel):
    """Клиент отеля."""

    model_config = ConfigDict(validate_assignment=True)

    id: EntityId = Field(frozen=True, gt=0)
    name: str = Field(frozen=True)
    tax_id: str = Field(frozen=True)  # DNI
    email: str = Field(frozen=True)
    is_vip: bool = False

    @field_validator("name")
    @classmethod
    def _name_is_valid(cls, v: str) -> str:
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def _email_is_valid(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("tax_id")
    @classmethod
    def _tax_id_is_valid(cls, v: str) -> str:
        return validate_tax_id(v)

    def promote_to_vip(self) -> bool:
        """Делает клиента VIP. Возвращает False, если он уже VIP."""
        if self.is_vip:
            return False
        self.is_vip = True
        return True


class Room(BaseModel):
    """Номер в отеле."""

    model_config = ConfigDict(validate_assignment=True)

    number: EntityId = Field(frozen=True, gt=0)
    type: str = Field(frozen=True)
    base_price: float = Field(frozen=True, ge=0)
    # Доступность не зависит от дат: забронированный номер остается занятым
    available: bool = True

    def matches_type(self, room_type: str) -> bool:
        """Сравнивает тип номера без учета регистра."""
        return self.type.casefold() == room_type.casefold()

    def reserve(self) -> None:
        if not self.available:
            raise RoomAlreadyReservedError(self.number)
        self.available = False


class StayLengthMode(str, Enum):
    """Способ подсчета длительности проживания."""

    # Разница порядковых дней года; через 31 декабря дает неверный результат
    DAY_OF_YEAR = "day_of_year"
    CALENDAR = "calendar"


class PricingPolicy:
    """Политика расчета стоимости бронирования."""

    VIP_DISCOUNT = 0.90
    LONG_STAY_DISCOUNT = 0.95
    LONG_STAY_MIN_DAYS = 7  # скидка действует, если дней строго больше

    def __init__(self, stay_length_mode: StayLengthMode = StayLengthMode.DAY_OF_YEAR):
        self.stay_length_mode = StayLengthMode(stay_length_mode)

    def stay_length(self, check_in: date, check_out: date) -> int:
        """Количество дней проживания."""
        if self.stay_length_mode is StayLengthMode.CALENDAR:
            return (check_out - check_in).days
        return check_out.timetuple().tm_yday - check_in.timetuple().tm_yday

    def compute_total_price(
        self, room: Room, customer: Customer, check_in: date, check_out: date
    ) -> float:
        """Рассчитывает итоговую цену.

        Базовая цена умножается на число дней, затем независимо
        применяются скидка VIP и скидка за длительное проживание.
        """
        days = self.stay_length(check_in, check_out)
        price = room.base_price * days

        if customer.is_vip:
            price *= self.VIP_DISCOUNT

        if days > self.LONG_STAY_MIN_DAYS:
            price *= self.LONG_STAY_DISCOUNT

        return price


class Booking(BaseModel):
    """Бронирование номера. После создания не изменяется."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(..., gt=0)
    room_number: EntityId
    customer_id: EntityId
    check_in: date
    check_out: date
    total_price: float

    @classmethod
    def create(
        cls,
        booking_id: EntityId,
        room: Room,
        customer: Customer,
        check_in: date,
        check_out: date,
        pricing_policy: PricingPolicy,
    ) -> "Booking":
        """Создает бронирование, фиксируя цену на момент создания."""
        return cls(
            id=booking_id,
            room_number=room.number,
            customer_id=customer.id,
            check_in=check_in,
            check_out=check_out,
            total_price=pricing_policy.compute_total_price(
                room, customer, check_in, check_out
            ),
        )


class VipPolicy:
    """Правило автоматического повышения клиента до VIP."""

    PROMOTION_THRESHOLD = 3  # бронирований за последний год, нужно строго больше

    def __init__(self, clock: Callable[[], date] = today):
        self._clock = clock

    def count_recent_bookings(
        self, bookings: List[Booking], customer_id: EntityId
    ) -> int:
        """Считает бронирования клиента с заездом позже, чем год назад."""
        since = one_year_before(self._clock())
        return sum(
            1
            for booking in bookings
            if booking.customer_id == customer_id and booking.check_in > since
        )

    def qualifies(self, customer: Customer, recent_bookings: int) -> bool:
        return not customer.is_vip and recent_bookings > self.PROMOTION_THRESHOLD


# ===================================================================
# Доменные события
# ===================================================================


class RoomRegistered(DomainEvent):
    """Событие регистрации номера."""

    room_number: EntityId
    room_type: str
    base_price: float


class CustomerRegistered(DomainEvent):
    """Событие регистрации клиента."""

    customer_id: EntityId
    name: str
    is_vip: bool


class RoomReserved(DomainEvent):
    """Событие успешного бронирования."""

    booking_id: EntityId
    room_number: EntityId
    customer_id: EntityId
    check_in: date
    check_out: date
    total_price: float


class CustomerPromotedToVip(DomainEvent):
    """Событие повышения клиента до VIP."""

    customer_id: EntityId
    name: str
    recent_bookings: int


# ===================================================================
# Агрегат
# ===================================================================


class Hotel:
    """Агрегат "Отель". Корень агрегата.

    Владеет клиентами (по id), номерами (в порядке регистрации)
    и бронированиями, сгруппированными по номеру комнаты.
    Бронирования ссылаются на номер и клиента по идентификаторам.
    """

    def __init__(
        self,
        name: str,
        address: str,
        phone: str,
        pricing_policy: Optional[PricingPolicy] = None,
        vip_policy: Optional[VipPolicy] = None,
    ):
        self.name = name
        self.address = address
        self.phone = phone
        self._pricing_policy = pricing_policy or PricingPolicy()
        self._vip_policy = vip_policy or VipPolicy()
        self._customers: Dict[EntityId, Customer] = {}
        self._rooms: List[Room] = []
        self._bookings_by_room: Dict[EntityId, List[Booking]] = {}
        self._domain_events: List[DomainEvent] = []

    # --- события ---

    def _add_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Извлекает события и очищает список."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events

    # --- номера ---

    def register_room(self, room_type: str, base_price: float) -> Room:
        """Регистрирует новый номер; номера нумеруются с 1 по порядку."""
        if not math.isfinite(base_price) or base_price < 0:
            raise BusinessRuleValidationException(
                "Базовая цена номера должна быть неотрицательным конечным числом"
            )

        room = Room(number=len(self._rooms) + 1, type=room_type, base_price=base_price)
        self._rooms.append(room)
        self._bookings_by_room[room.number] = []
        self._add_event(
            RoomRegistered(
                room_number=room.number, room_type=room.type, base_price=room.base_price
            )
        )
        return room

    @property
    def rooms(self) -> List[Room]:
        return list(self._rooms)

    def get_room(self, number: EntityId) -> Optional[Room]:
        for room in self._rooms:
            if room.number == number:
                return room
        return None

    def list_available_rooms(self) -> List[Room]:
        """Свободные номера в порядке регистрации."""
        return [room for room in self._rooms if room.available]

    # --- клиенты ---

    def register_customer(
        self, name: str, email: str, tax_id: str, is_vip: bool = False
    ) -> Customer:
        """Регистрирует клиента после проверки имени, email и DNI."""
        validate_name(name)
        validate_email(email)
        validate_tax_id(tax_id)

        customer = Customer(
            id=len(self._customers) + 1,
            name=name,
            email=email,
            tax_id=tax_id,
            is_vip=is_vip,
        )
        self._customers[customer.id] = customer
        self._add_event(
            CustomerRegistered(
                customer_id=customer.id, name=customer.name, is_vip=customer.is_vip
            )
        )
        return customer

    def get_customer(self, customer_id: EntityId) -> Optional[Customer]:
        return self._customers.get(customer_id)

    def list_customers(self) -> List[Customer]:
        return list(self._customers.values())

    # --- бронирования ---

    @property
    def booking_count(self) -> int:
        return sum(len(bookings) for bookings in self._bookings_by_room.values())

    def list_bookings(self) -> List[Tuple[EntityId, List[Booking]]]:
        """Бронирования по номерам: номера в порядке регистрации,
        бронирования в порядке создания."""
        return [
            (room.number, list(self._bookings_by_room[room.number]))
            for room in self._rooms
        ]

    def bookings_for_room(self, room_number: EntityId) -> List[Booking]:
        return list(self._bookings_by_room.get(room_number, []))

    def bookings_for_customer(self, customer_id: EntityId) -> List[Booking]:
        return [
            booking
            for bookings in self._bookings_by_room.values()
            for booking in bookings
            if booking.customer_id == customer_id
        ]

    def reserve_room(
        self,
        customer_id: EntityId,
        room_type: str,
        check_in: date,
        check_out: date,
    ) -> EntityId:
        """Бронирует первый свободный номер запрошенного типа.

        Returns:
            Номер забронированной комнаты.

        Raises:
            NoRoomsError: в отеле нет номеров.
            CustomerNotFoundError: клиент не найден.
            InvalidDatesError: дата заезда не раньше даты выезда.
            RoomTypeUnavailableError: нет свободных номеров этого типа.
        """
        if not self._rooms:
            raise NoRoomsError()

        customer = self.get_customer(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)

        if not check_in < check_out:
            raise InvalidDatesError(check_in, check_out)

        room = self._find_available_room(room_type)
        if room is None:
            raise RoomTypeUnavailableError(room_type)

        # Проверка выполняется до создания бронирования,
        # поэтому новое бронирование в подсчет не попадает
        self._check_vip_promotion(customer)

        booking = Booking.create(
            booking_id=self.booking_count + 1,
            room=room,
            customer=customer,
            check_in=check_in,
            check_out=check_out,
            pricing_policy=self._pricing_policy,
        )
        self._bookings_by_room[room.number].append(booking)
        room.reserve()

        self._add_event(
            RoomReserved(
                booking_id=booking.id,
                room_number=room.number,
                customer_id=customer.id,
                check_in=booking.check_in,
                check_out=booking.check_out,
                total_price=booking.total_price,
            )
        )
        return room.number

    def _find_available_room(self, room_type: str) -> Optional[Room]:
        for room in self._rooms:
            if room.matches_type(room_type) and room.available:
                return room
        return None

    def _check_vip_promotion(self, customer: Customer) -> None:
        recent = self._vip_policy.count_recent_bookings(
            self.bookings_for_customer(customer.id), customer.id
        )
        if self._vip_policy.qualifies(customer, recent) and customer.promote_to_vip():
            self._add_event(
                CustomerPromotedToVip(
                    customer_id=customer.id, name=customer.name, recent_bookings=recent
                )
            )
