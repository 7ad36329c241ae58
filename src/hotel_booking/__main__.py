from hotel_booking.cli import app

app(prog_name="hotel-booking")
