"""Консольное меню отеля и точка входа на Typer."""
from datetime import date
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hotel_booking.bootstrap import bootstrap_app
from hotel_booking.config import Settings
from hotel_booking.hotel.application import HotelApplicationService, ReservationDTO
from hotel_booking.hotel.domain import (
    CustomerPromotedToVip,
    CustomerValidationError,
    ReservationError,
    RoomType,
    StayLengthMode,
    validate_email,
    validate_name,
    validate_tax_id,
)
from hotel_booking.shared_kernel import DomainException

TRUE_ANSWERS = {"да", "д", "y", "yes", "true", "1"}
FALSE_ANSWERS = {"нет", "н", "n", "no", "false", "0"}


def make_vip_notifier(console: Console) -> Callable[[CustomerPromotedToVip], None]:
    """Обработчик события повышения до VIP, печатающий уведомление."""

    def notify(event: CustomerPromotedToVip) -> None:
        console.print(f"[bold green]Клиент {escape(event.name)} стал VIP[/bold green]")

    return notify


class HotelMenu:
    """Интерактивное меню управления отелем."""

    REGISTER_ROOM = 1
    LIST_AVAILABLE_ROOMS = 2
    RESERVE_ROOM = 11
    LIST_BOOKINGS = 12
    LIST_CUSTOMERS = 21
    REGISTER_CUSTOMER = 22
    EXIT = 0

    def __init__(
        self,
        service: HotelApplicationService,
        console: Console,
        read_line: Callable[[], str] = input,
    ):
        self._service = service
        self._console = console
        self._read_line = read_line
        self._actions = {
            self.REGISTER_ROOM: self.register_room,
            self.LIST_AVAILABLE_ROOMS: self.list_available_rooms,
            self.RESERVE_ROOM: self.reserve_room,
            self.LIST_BOOKINGS: self.list_bookings,
            self.LIST_CUSTOMERS: self.list_customers,
            self.REGISTER_CUSTOMER: self.register_customer,
        }

    def run(self) -> int:
        """Крутит меню до выбора выхода или конца ввода. Возвращает код выхода."""
        self._console.print(f"[bold]Отель {escape(self._service.hotel_name)}[/bold]")
        try:
            while True:
                self.show_menu()
                option = self._ask_int("Выберите опцию:")
                if option == self.EXIT:
                    break
                action = self._actions.get(option)
                if action is None:
                    self._console.print("[yellow]Недопустимая опция[/yellow]")
                    continue
                try:
                    action()
                except DomainException as e:
                    self._console.print(f"[red]Ошибка:[/red] {escape(str(e))}")
        except EOFError:
            pass
        self._console.print("Выход из программы...")
        return 0

    def show_menu(self) -> None:
        self._console.print("\n[bold]Меню:[/bold]")
        self._console.print(f"{self.REGISTER_ROOM}. Зарегистрировать номер")
        self._console.print(f"{self.LIST_AVAILABLE_ROOMS}. Список свободных номеров")
        self._console.print(f"{self.RESERVE_ROOM}. Забронировать номер")
        self._console.print(f"{self.LIST_BOOKINGS}. Список бронирований")
        self._console.print(f"{self.LIST_CUSTOMERS}. Список клиентов")
        self._console.print(f"{self.REGISTER_CUSTOMER}. Зарегистрировать клиента")
        self._console.print(f"{self.EXIT}. Выход")

    # --- действия ---

    def register_room(self) -> None:
        known = ", ".join(t.value for t in RoomType)
        room_type = self._ask(f"Введите тип номера ({known}):").strip()
        base_price = self._ask_float("Введите базовую цену номера:")
        room = self._service.register_room(room_type, base_price)
        self._console.print(
            f"Номер #{room.number} зарегистрирован: {escape(room.type)} "
            f"- базовая цена: {room.base_price:.2f}"
        )

    def list_available_rooms(self) -> None:
        rooms = self._service.list_available_rooms()
        if not rooms:
            self._console.print("Свободных номеров нет")
            return
        table = Table(title="Свободные номера")
        table.add_column("Номер", justify="right")
        table.add_column("Тип")
        table.add_column("Базовая цена", justify="right")
        for room in rooms:
            table.add_row(f"#{room.number}", escape(room.type), f"{room.base_price:.2f}")
        self._console.print(table)

    def reserve_room(self) -> None:
        customer_id = self._ask_int("Введите id клиента:")
        room_type = self._ask("Введите тип номера:").strip()
        check_in = self._ask_date("Введите дату заезда (ГГГГ-ММ-ДД):")
        check_out = self._ask_date("Введите дату выезда (ГГГГ-ММ-ДД):")
        try:
            reservation = self._service.reserve_room(
                customer_id, room_type, check_in, check_out
            )
        except ReservationError as e:
            self._console.print(
                f"[red]Бронирование не выполнено:[/red] {escape(str(e))} (код {e.code})"
            )
            return
        self._print_reservation(reservation)

    def list_bookings(self) -> None:
        for room_bookings in self._service.list_bookings():
            self._console.print(f"[bold]Номер #{room_bookings.room_number}[/bold]")
            if not room_bookings.bookings:
                self._console.print("  бронирований нет")
                continue
            table = Table()
            table.add_column("Бронь", justify="right")
            table.add_column("Клиент")
            table.add_column("Заезд")
            table.add_column("Выезд")
            table.add_column("Итого, €", justify="right")
            for booking in room_bookings.bookings:
                table.add_row(
                    f"#{booking.id}",
                    escape(booking.customer_name),
                    booking.check_in.isoformat(),
                    booking.check_out.isoformat(),
                    f"{booking.total_price:.2f}",
                )
            self._console.print(table)

    def list_customers(self) -> None:
        customers = self._service.list_customers()
        if not customers:
            self._console.print("Клиентов нет")
            return
        table = Table(title="Клиенты")
        table.add_column("Id", justify="right")
        table.add_column("Имя")
        table.add_column("DNI")
        table.add_column("Email")
        table.add_column("VIP")
        for customer in customers:
            table.add_row(
                f"#{customer.id}",
                escape(customer.name),
                customer.tax_id,
                escape(customer.email),
                "да" if customer.is_vip else "нет",
            )
        self._console.print(table)

    def register_customer(self) -> None:
        name = self._ask_valid("Введите имя клиента:", validate_name)
        email = self._ask_valid("Введите email клиента:", validate_email)
        tax_id = self._ask_valid("Введите DNI клиента:", validate_tax_id)
        is_vip = self._ask_bool("Клиент VIP? (да/нет):")
        customer = self._service.register_customer(name, email, tax_id, is_vip)
        self._console.print(
            f"Клиент #{customer.id} зарегистрирован: {escape(customer.name)}"
        )

    # --- ввод ---

    def _ask(self, prompt: str) -> str:
        self._console.print(prompt)
        return self._read_line()

    def _ask_int(self, prompt: str) -> int:
        while True:
            answer = self._ask(prompt).strip()
            try:
                return int(answer)
            except ValueError:
                self._console.print("[yellow]Введите целое число[/yellow]")

    def _ask_float(self, prompt: str) -> float:
        while True:
            answer = self._ask(prompt).strip().replace(",", ".")
            try:
                return float(answer)
            except ValueError:
                self._console.print("[yellow]Введите число[/yellow]")

    def _ask_date(self, prompt: str) -> date:
        while True:
            answer = self._ask(prompt).strip()
            try:
                return date.fromisoformat(answer)
            except ValueError:
                self._console.print("[yellow]Некорректная дата, формат ГГГГ-ММ-ДД[/yellow]")

    def _ask_bool(self, prompt: str) -> bool:
        while True:
            answer = self._ask(prompt).strip().lower()
            if answer in TRUE_ANSWERS:
                return True
            if answer in FALSE_ANSWERS:
                return False
            self._console.print("[yellow]Ответьте «да» или «нет»[/yellow]")

    def _ask_valid(self, prompt: str, validator: Callable[[str], str]) -> str:
        while True:
            answer = self._ask(prompt).strip()
            try:
                return validator(answer)
            except CustomerValidationError as e:
                self._console.print(
                    f"[yellow]{escape(e.message)}. Попробуйте еще раз.[/yellow]"
                )

    def _print_reservation(self, reservation: ReservationDTO) -> None:
        room = reservation.room
        booking = reservation.booking
        self._console.print("[green]Бронирование выполнено[/green]")
        self._console.print(
            f"Номер #{room.number} - тип: {escape(room.type)} "
            f"- базовая цена: {room.base_price:.2f}"
        )
        self._console.print(
            f"Бронь #{booking.id}: {booking.check_in.isoformat()} - "
            f"{booking.check_out.isoformat()}, итого {booking.total_price:.2f} €"
        )


app = typer.Typer(
    name="hotel-booking",
    help="Консольное управление номерами, клиентами и бронированиями отеля.",
    add_completion=False,
)


@app.command()
def main(
    no_seed: bool = typer.Option(
        False,
        "--no-seed",
        help="Запустить с пустым отелем, без демонстрационных номеров и клиентов",
    ),
    calendar_days: bool = typer.Option(
        False,
        "--calendar-days",
        help="Считать длительность проживания в календарных днях, а не по дням года",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING или ERROR (заменяет HOTEL_LOG_LEVEL)",
    ),
):
    """Запускает интерактивное меню отеля."""
    settings = Settings()
    overrides = {}
    if no_seed:
        overrides["seed_demo_data"] = False
    if calendar_days:
        overrides["stay_length_mode"] = StayLengthMode.CALENDAR
    if log_level is not None:
        level = log_level.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise typer.BadParameter(f"Неизвестный уровень логирования {log_level}")
        overrides["log_level"] = level
    if overrides:
        settings = settings.model_copy(update=overrides)

    components = bootstrap_app(settings)
    console = Console()
    components["uow"].event_bus.subscribe(
        CustomerPromotedToVip, make_vip_notifier(console)
    )

    menu = HotelMenu(components["hotel_service"], console)
    raise typer.Exit(code=menu.run())


if __name__ == "__main__":
    app()
