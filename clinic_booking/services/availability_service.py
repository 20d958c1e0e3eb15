from typing import Iterable, List

from clinic_booking.models.booking import Booking

# Bookable start times, one booking per slot. Service duration does not block
# neighbouring slots.
TIME_SLOTS = [
    "08:00", "09:00", "10:00", "11:00", "12:00",
    "13:00", "14:00", "15:00", "16:00", "17:00", "18:00",
]

def booked_times(bookings: Iterable[Booking], date: str) -> List[str]:
    """Times already taken on `date`, in the order they appear."""
    return [booking.time for booking in bookings if booking.date == date]

def available_slots(bookings: Iterable[Booking], date: str) -> List[str]:
    """
    Returns the fixed slot labels minus everything booked on `date`.
    Order follows TIME_SLOTS.
    """
    taken = set(booked_times(bookings, date))
    return [slot for slot in TIME_SLOTS if slot not in taken]
