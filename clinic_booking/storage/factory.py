from clinic_booking.core.config import Settings
from clinic_booking.storage.base import BookingStore
from clinic_booking.storage.json_store import JsonBookingStore
from clinic_booking.storage.sql_store import SqlBookingStore


def build_store(settings: Settings) -> BookingStore:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "json":
        return JsonBookingStore(settings.BOOKINGS_FILE)
    if backend == "sqlite":
        return SqlBookingStore(settings.DATABASE_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r} (expected 'json' or 'sqlite')")
