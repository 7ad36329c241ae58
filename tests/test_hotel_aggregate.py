"""
Тесты агрегата "Отель": регистрация, поиск свободных номеров,
бронирование и повышение клиентов до VIP.
"""
from datetime import date, timedelta

import pytest

from hotel_booking.hotel.domain import (
    CustomerNotFoundError,
    CustomerPromotedToVip,
    CustomerRegistered,
    CustomerValidationError,
    InvalidDatesError,
    NoRoomsError,
    ReservationError,
    ReservationErrorKind,
    RoomRegistered,
    RoomReserved,
    RoomTypeUnavailableError,
)
from hotel_booking.shared_kernel import BusinessRuleValidationException

JAN_1 = date(2024, 1, 1)
JAN_4 = date(2024, 1, 4)


@pytest.fixture
def ana(hotel):
    return hotel.register_customer("Ana", "ana@a.com", "12345678A", False)


class TestRegistration:
    """Тесты регистрации номеров и клиентов."""

    def test_rooms_are_numbered_sequentially(self, hotel):
        rooms = [hotel.register_room(t, 50) for t in ("SIMPLE", "DOUBLE", "SUITE")]
        assert [room.number for room in rooms] == [1, 2, 3]
        assert [room.number for room in hotel.rooms] == [1, 2, 3]

    def test_new_room_has_empty_booking_list(self, hotel):
        room = hotel.register_room("SIMPLE", 50)
        assert hotel.list_bookings() == [(room.number, [])]

    def test_negative_price_is_rejected(self, hotel):
        with pytest.raises(BusinessRuleValidationException):
            hotel.register_room("SIMPLE", -1)
        assert hotel.rooms == []

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_price_is_rejected(self, hotel, price):
        with pytest.raises(BusinessRuleValidationException):
            hotel.register_room("SIMPLE", price)
        assert hotel.rooms == []

    def test_customers_get_sequential_ids(self, hotel):
        first = hotel.register_customer("Ana", "ana@a.com", "12345678A")
        second = hotel.register_customer("Luis", "luis@b.es", "87654321B", True)
        assert (first.id, second.id) == (1, 2)
        assert second.is_vip is True
        assert hotel.get_customer(2) is second

    def test_invalid_customer_is_not_registered(self, hotel):
        with pytest.raises(CustomerValidationError):
            hotel.register_customer("Ana", "no-email", "12345678A")
        assert hotel.list_customers() == []

        # Неудачная регистрация не занимает id
        customer = hotel.register_customer("Ana", "ana@a.com", "12345678A")
        assert customer.id == 1

    def test_get_room(self, hotel):
        hotel.register_room("SIMPLE", 50)
        double = hotel.register_room("DOUBLE", 80)
        assert hotel.get_room(2) is double
        assert hotel.get_room(3) is None

    def test_registration_records_events(self, hotel):
        hotel.register_room("SIMPLE", 50)
        hotel.register_customer("Ana", "ana@a.com", "12345678A")

        events = hotel.pull_domain_events()
        assert [type(e) for e in events] == [RoomRegistered, CustomerRegistered]
        assert hotel.pull_domain_events() == []


class TestAvailableRooms:
    """Тесты списка свободных номеров."""

    def test_all_rooms_available_initially(self, hotel):
        hotel.register_room("SIMPLE", 50)
        hotel.register_room("DOUBLE", 80)
        assert [r.number for r in hotel.list_available_rooms()] == [1, 2]

    def test_reserved_room_disappears_from_list(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        hotel.register_room("DOUBLE", 80)

        hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4)

        assert [r.number for r in hotel.list_available_rooms()] == [2]
        assert [r.number for r in hotel.list_available_rooms()] == [2]


class TestReserveRoom:
    """Тесты алгоритма бронирования."""

    def test_reference_scenario(self, hotel):
        hotel.register_room("SIMPLE", 50)
        hotel.register_room("DOUBLE", 80)
        customer = hotel.register_customer("Ana", "ana@a.com", "12345678A", False)

        room_number = hotel.reserve_room(customer.id, "SIMPLE", JAN_1, JAN_4)

        assert room_number == 1
        booking = hotel.bookings_for_room(1)[0]
        assert booking.id == 1
        assert booking.customer_id == customer.id
        assert booking.total_price == pytest.approx(150.0)
        assert hotel.get_room(1).available is False

    def test_type_match_ignores_case(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        assert hotel.reserve_room(ana.id, "simple", JAN_1, JAN_4) == 1

    def test_first_matching_room_wins(self, hotel, ana):
        hotel.register_room("DOUBLE", 80)
        hotel.register_room("SIMPLE", 65)
        hotel.register_room("SIMPLE", 50)

        assert hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4) == 2
        assert hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4) == 3

    def test_no_rooms(self, hotel, ana):
        with pytest.raises(NoRoomsError) as exc_info:
            hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4)
        assert exc_info.value.kind is ReservationErrorKind.NO_ROOMS
        assert exc_info.value.code == -4

    def test_no_rooms_takes_precedence_over_unknown_customer(self, hotel):
        with pytest.raises(NoRoomsError):
            hotel.reserve_room(99, "SIMPLE", JAN_4, JAN_1)

    @pytest.mark.parametrize(
        "check_in, check_out",
        [(JAN_1, JAN_4), (JAN_4, JAN_1), (JAN_1, JAN_1)],
    )
    @pytest.mark.parametrize("room_type", ["SIMPLE", "UNKNOWN"])
    def test_unknown_customer(self, hotel, room_type, check_in, check_out):
        hotel.register_room("SIMPLE", 50)
        with pytest.raises(CustomerNotFoundError) as exc_info:
            hotel.reserve_room(42, room_type, check_in, check_out)
        assert exc_info.value.code == -3

    @pytest.mark.parametrize(
        "check_in, check_out", [(JAN_4, JAN_1), (JAN_1, JAN_1)]
    )
    def test_invalid_dates(self, hotel, ana, check_in, check_out):
        hotel.register_room("SIMPLE", 50)
        with pytest.raises(InvalidDatesError) as exc_info:
            hotel.reserve_room(ana.id, "SIMPLE", check_in, check_out)
        assert exc_info.value.code == -2
        assert hotel.get_room(1).available is True

    def test_type_unavailable(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        with pytest.raises(RoomTypeUnavailableError) as exc_info:
            hotel.reserve_room(ana.id, "SUITE", JAN_1, JAN_4)
        assert exc_info.value.code == -1

    def test_type_unavailable_once_all_rooms_taken(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4)
        # Доступность не зависит от дат: даже непересекающийся период отклоняется
        with pytest.raises(RoomTypeUnavailableError):
            hotel.reserve_room(ana.id, "SIMPLE", date(2024, 3, 1), date(2024, 3, 2))

    def test_all_reservation_errors_share_base_class(self, hotel):
        with pytest.raises(ReservationError):
            hotel.reserve_room(1, "SIMPLE", JAN_1, JAN_4)

    def test_booking_ids_are_global(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        hotel.register_room("DOUBLE", 80)
        hotel.register_room("SUITE", 120)

        hotel.reserve_room(ana.id, "DOUBLE", JAN_1, JAN_4)
        hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4)

        assert hotel.bookings_for_room(2)[0].id == 1
        assert hotel.bookings_for_room(1)[0].id == 2
        assert hotel.booking_count == 2

    def test_list_bookings_follows_registration_order(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        hotel.register_room("DOUBLE", 80)
        hotel.reserve_room(ana.id, "DOUBLE", JAN_1, JAN_4)

        listing = hotel.list_bookings()
        assert [number for number, _ in listing] == [1, 2]
        assert listing[0][1] == []
        assert [b.id for b in listing[1][1]] == [1]

    def test_vip_customer_gets_discount(self, hotel):
        hotel.register_room("SIMPLE", 50)
        vip = hotel.register_customer("Daniel", "daniel@daniel.com", "12345678A", True)

        hotel.reserve_room(vip.id, "SIMPLE", JAN_1, JAN_4)

        assert hotel.bookings_for_room(1)[0].total_price == pytest.approx(135.0)

    def test_reservation_records_event(self, hotel, ana):
        hotel.register_room("SIMPLE", 50)
        hotel.pull_domain_events()

        hotel.reserve_room(ana.id, "SIMPLE", JAN_1, JAN_4)

        events = hotel.pull_domain_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, RoomReserved)
        assert event.room_number == 1
        assert event.customer_id == ana.id
        assert event.total_price == pytest.approx(150.0)


class TestVipPromotion:
    """Тесты автоматического повышения до VIP."""

    def _reserve_n(self, hotel, customer, n, start=date(2024, 1, 1)):
        prices = []
        for i in range(n):
            check_in = start + timedelta(days=10 * i)
            number = hotel.reserve_room(
                customer.id, "SIMPLE", check_in, check_in + timedelta(days=3)
            )
            prices.append(hotel.bookings_for_room(number)[-1].total_price)
        return prices

    def test_fifth_booking_in_a_year_is_discounted(self, hotel, ana):
        for _ in range(5):
            hotel.register_room("SIMPLE", 50)

        prices = self._reserve_n(hotel, ana, 4)
        # Четвертая бронь сама себя не учитывает
        assert ana.is_vip is False
        assert prices == [pytest.approx(150.0)] * 4

        prices = self._reserve_n(hotel, ana, 1, start=date(2024, 5, 1))
        assert ana.is_vip is True
        assert prices == [pytest.approx(135.0)]

    def test_promotion_records_single_event(self, hotel, ana):
        for _ in range(6):
            hotel.register_room("SIMPLE", 50)
        self._reserve_n(hotel, ana, 6)

        promotions = [
            e for e in hotel.pull_domain_events() if isinstance(e, CustomerPromotedToVip)
        ]
        assert len(promotions) == 1
        assert promotions[0].customer_id == ana.id
        assert promotions[0].recent_bookings == 4

    def test_old_bookings_do_not_count(self, hotel, ana):
        for _ in range(5):
            hotel.register_room("SIMPLE", 50)
        # FIXED_TODAY = 2024-06-01, бронирования годичной давности не учитываются
        self._reserve_n(hotel, ana, 4, start=date(2023, 1, 1))
        self._reserve_n(hotel, ana, 1, start=date(2024, 5, 1))

        assert ana.is_vip is False

    def test_other_customers_bookings_do_not_count(self, hotel, ana):
        luis = hotel.register_customer("Luis", "luis@b.es", "87654321B")
        for _ in range(5):
            hotel.register_room("SIMPLE", 50)

        self._reserve_n(hotel, ana, 4)
        self._reserve_n(hotel, luis, 1, start=date(2024, 5, 1))

        assert luis.is_vip is False
        assert ana.is_vip is False
