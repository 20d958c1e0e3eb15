import asyncio
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import BackgroundTasks

from clinic_booking.core.errors import BookingNotFoundError, BookingValidationError, SlotTakenError
from clinic_booking.core.logger import logger
from clinic_booking.models.booking import AvailableTimesResponse, Booking, BookingRequest, BookingStats
from clinic_booking.services.availability_service import available_slots, booked_times
from clinic_booking.services.notification_service import NotificationDispatcher
from clinic_booking.storage.base import BookingStore

REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone", "service", "date", "time")


def new_booking_id() -> str:
    # uuid1 is time based and unique within the process
    return uuid.uuid1().hex


class BookingService:
    def __init__(self, store: BookingStore, dispatcher: NotificationDispatcher):
        self.store = store
        self.dispatcher = dispatcher

    async def get_available_times(self, day: Optional[str]) -> AvailableTimesResponse:
        if not day or not day.strip():
            raise BookingValidationError("Date parameter is required")

        bookings = await asyncio.to_thread(self.store.list_by_date, day)
        return AvailableTimesResponse(
            date=day,
            available_times=available_slots(bookings, day),
            booked_times=booked_times(bookings, day),
        )

    def validate(self, request: BookingRequest) -> dict:
        """
        Strips the incoming fields and checks the required ones are present.
        Returns: cleaned field values keyed by attribute name.
        """
        values = {
            name: (value.strip() if isinstance(value, str) else "")
            for name, value in request.model_dump().items()
        }
        missing = [name for name in REQUIRED_FIELDS if not values[name]]
        if missing:
            logger.info(f"📥 Booking rejected, missing fields: {missing}")
            raise BookingValidationError("Wszystkie wymagane pola muszą być wypełnione")
        return values

    async def create_booking(self, request: BookingRequest, background_tasks: BackgroundTasks) -> Booking:
        """
        Books one slot.

        The slot is checked here and again inside store.insert. Only the
        second check is atomic with the write.
        """
        values = self.validate(request)
        day, time = values["date"], values["time"]
        logger.info(f"📥 Booking Request - Day: {day}, Time: {time}, Service: {values['service']}")

        taken_message = "Ten termin jest już zajęty. Proszę wybrać inny."
        if await asyncio.to_thread(self.store.exists, day, time):
            logger.info(f"⛔ Slot {day} {time} already booked")
            raise SlotTakenError(taken_message)

        booking = Booking(id=new_booking_id(), **values)

        try:
            await asyncio.to_thread(self.store.insert, booking)
        except SlotTakenError:
            logger.warning(f"⛔ Slot {day} {time} was taken while booking")
            raise SlotTakenError(taken_message)

        logger.info(f"✅ Booking {booking.id} saved for {day} {time}")

        self.dispatcher.notify_booking_created(booking, background_tasks)
        return booking

    async def list_bookings(self) -> List[Booking]:
        return await asyncio.to_thread(self.store.list)

    async def get_booking(self, booking_id: str) -> Booking:
        booking = await asyncio.to_thread(self.store.get, booking_id)
        if booking is None:
            raise BookingNotFoundError("Rezerwacja nie znaleziona")
        return booking

    async def delete_booking(self, booking_id: str):
        deleted = await asyncio.to_thread(self.store.delete, booking_id)
        if not deleted:
            raise BookingNotFoundError("Rezerwacja nie znaleziona")
        logger.info(f"🗑️ Booking {booking_id} deleted.")

    async def search_bookings(self, query: str) -> List[Booking]:
        if not query or not query.strip():
            raise BookingValidationError("Search query is required")
        return await asyncio.to_thread(self.store.search, query)

    async def get_stats(self, today: Optional[str] = None) -> BookingStats:
        today = today or datetime.now(timezone.utc).date().isoformat()
        return await asyncio.to_thread(self.store.stats, today)
