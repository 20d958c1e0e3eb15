from fastapi import Request

from clinic_booking.services.booking_service import BookingService
from clinic_booking.services.notification_service import NotificationDispatcher
from clinic_booking.storage.base import BookingStore

# Resources live on app.state; they are created and closed by the lifespan in main.py.

def get_store(request: Request) -> BookingStore:
    return request.app.state.store

def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher

def get_booking_service(request: Request) -> BookingService:
    return BookingService(get_store(request), get_dispatcher(request))
