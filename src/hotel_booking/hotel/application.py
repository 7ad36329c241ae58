"""
Прикладной слой контекста отеля.

Содержит сервис приложения, который координирует
взаимодействие консольного интерфейса и доменной модели.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from ..shared_kernel import DomainException, EntityId
from . import interfaces as ports
from .domain import Booking, Customer, ReservationError, Room
from .infrastructure import ConsoleLogger

# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера."""

    number: EntityId
    type: str
    base_price: float
    available: bool

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            number=room.number,
            type=room.type,
            base_price=room.base_price,
            available=room.available,
        )


class CustomerDTO(BaseModel):
    """DTO для представления клиента."""

    id: EntityId
    name: str
    tax_id: str
    email: str
    is_vip: bool

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=customer.id,
            name=customer.name,
            tax_id=customer.tax_id,
            email=customer.email,
            is_vip=customer.is_vip,
        )


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    room_number: EntityId
    room_type: str
    room_base_price: float
    customer_id: EntityId
    customer_name: str
    check_in: date
    check_out: date
    total_price: float

    @classmethod
    def from_domain(
        cls, booking: Booking, room: Room, customer: Customer
    ) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            room_number=room.number,
            room_type=room.type,
            room_base_price=room.base_price,
            customer_id=customer.id,
            customer_name=customer.name,
            check_in=booking.check_in,
            check_out=booking.check_out,
            total_price=booking.total_price,
        )


class RoomBookingsDTO(BaseModel):
    """Бронирования одного номера."""

    room_number: EntityId
    bookings: List[BookingDTO]


class ReservationDTO(BaseModel):
    """Результат успешного бронирования."""

    room: RoomDTO
    booking: BookingDTO

    @property
    def room_number(self) -> EntityId:
        return self.room.number


# Сервисы приложения


class HotelApplicationService:
    """Сервис приложения для работы с отелем."""

    def __init__(
        self,
        uow: ports.IHotelUnitOfWork,
        logger: Optional[ports.ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._logger = logger or ConsoleLogger()

    @property
    def hotel_name(self) -> str:
        return self._uow.hotel.name

    def register_room(self, room_type: str, base_price: float) -> RoomDTO:
        """Регистрирует новый номер."""
        try:
            with self._uow:
                room = self._uow.hotel.register_room(room_type, base_price)
        except DomainException as e:
            self._logger.error(f"Ошибка при регистрации номера: {str(e)}")
            raise

        self._logger.info("Номер зарегистрирован", number=room.number, type=room.type)
        return RoomDTO.from_domain(room)

    def register_customer(
        self, name: str, email: str, tax_id: str, is_vip: bool = False
    ) -> CustomerDTO:
        """Регистрирует нового клиента."""
        try:
            with self._uow:
                customer = self._uow.hotel.register_customer(
                    name=name, email=email, tax_id=tax_id, is_vip=is_vip
                )
        except DomainException as e:
            self._logger.error(f"Ошибка при регистрации клиента: {str(e)}")
            raise

        self._logger.info("Клиент зарегистрирован", id=customer.id)
        return CustomerDTO.from_domain(customer)

    def list_available_rooms(self) -> List[RoomDTO]:
        """Возвращает список свободных номеров."""
        return [
            RoomDTO.from_domain(room) for room in self._uow.hotel.list_available_rooms()
        ]

    def get_room(self, number: EntityId) -> Optional[RoomDTO]:
        """Возвращает информацию о номере."""
        room = self._uow.hotel.get_room(number)
        if room is None:
            return None
        return RoomDTO.from_domain(room)

    def reserve_room(
        self,
        customer_id: EntityId,
        room_type: str,
        check_in: date,
        check_out: date,
    ) -> ReservationDTO:
        """Бронирует номер запрошенного типа."""
        hotel = self._uow.hotel
        try:
            with self._uow:
                room_number = hotel.reserve_room(
                    customer_id, room_type, check_in, check_out
                )
        except ReservationError as e:
            self._logger.warning(
                f"Бронирование отклонено: {str(e)}",
                code=e.code,
                customer_id=customer_id,
                room_type=room_type,
            )
            raise

        room = hotel.get_room(room_number)
        customer = hotel.get_customer(customer_id)
        booking = hotel.bookings_for_room(room_number)[-1]
        self._logger.info(
            "Бронирование создано", booking_id=booking.id, room_number=room_number
        )
        return ReservationDTO(
            room=RoomDTO.from_domain(room),
            booking=BookingDTO.from_domain(booking, room, customer),
        )

    def list_bookings(self) -> List[RoomBookingsDTO]:
        """Возвращает бронирования, сгруппированные по номерам."""
        hotel = self._uow.hotel
        result = []
        for room_number, bookings in hotel.list_bookings():
            room = hotel.get_room(room_number)
            result.append(
                RoomBookingsDTO(
                    room_number=room_number,
                    bookings=[
                        BookingDTO.from_domain(
                            booking, room, hotel.get_customer(booking.customer_id)
                        )
                        for booking in bookings
                    ],
                )
            )
        return result

    def list_customers(self) -> List[CustomerDTO]:
        """Возвращает список клиентов."""
        return [
            CustomerDTO.from_domain(customer)
            for customer in self._uow.hotel.list_customers()
        ]
