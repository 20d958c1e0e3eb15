import json
import os
import tempfile
import threading
from typing import List, Optional

from pydantic import ValidationError

from clinic_booking.core.errors import SlotTakenError, StorageError
from clinic_booking.core.logger import logger
from clinic_booking.models.booking import Booking, BookingStats
from clinic_booking.storage.base import BookingStore

# One lock per file, shared by every store instance in this process
_file_locks = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    key = os.path.abspath(path)
    with _file_locks_guard:
        return _file_locks.setdefault(key, threading.Lock())


class JsonBookingStore(BookingStore):
    """
    Keeps every booking in one document: {"bookings": [...]}.

    The whole document is re-read for each query and rewritten for each
    mutation. Mutations hold a per-file lock shared by all instances, so the slot
    check and the write cannot interleave inside this process.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = _lock_for(path)
        self._ensure_file()

    def _ensure_file(self):
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        if not os.path.exists(self.path):
            self._write([])
            logger.info(f"📁 Created bookings file: {self.path}")

    def _read(self) -> List[Booking]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [Booking.model_validate(item) for item in raw.get("bookings", [])]
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
            logger.error(f"❌ Error reading bookings from {self.path}: {e}")
            raise StorageError("Could not read bookings") from e

    def _write(self, bookings: List[Booking]):
        data = {"bookings": [b.to_document() for b in bookings]}
        folder = os.path.dirname(os.path.abspath(self.path))
        try:
            # Atomic write
            with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp") as tf:
                json.dump(data, tf, ensure_ascii=False, indent=2)
                tmp_name = tf.name
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"❌ Error saving bookings to {self.path}: {e}")
            raise StorageError("Could not save bookings") from e

    def list(self) -> List[Booking]:
        return sorted(self._read(), key=lambda b: (b.date, b.time), reverse=True)

    def list_by_date(self, date: str) -> List[Booking]:
        return sorted((b for b in self._read() if b.date == date), key=lambda b: b.time)

    def exists(self, date: str, time: str) -> bool:
        return any(b.date == date and b.time == time for b in self._read())

    def get(self, booking_id: str) -> Optional[Booking]:
        return next((b for b in self._read() if b.id == booking_id), None)

    def insert(self, booking: Booking) -> Booking:
        with self._lock:
            bookings = self._read()
            if any(b.date == booking.date and b.time == booking.time for b in bookings):
                raise SlotTakenError(f"Slot {booking.date} {booking.time} is already booked")
            bookings.append(booking)
            self._write(bookings)
        return booking

    def delete(self, booking_id: str) -> bool:
        with self._lock:
            bookings = self._read()
            remaining = [b for b in bookings if b.id != booking_id]
            if len(remaining) == len(bookings):
                return False
            self._write(remaining)
        return True

    def search(self, query: str) -> List[Booking]:
        needle = query.strip().lower()
        matches = [
            b for b in self._read()
            if any(needle in value.lower() for value in (b.first_name, b.last_name, b.email, b.phone))
        ]
        return sorted(matches, key=lambda b: (b.date, b.time), reverse=True)

    def stats(self, today: str) -> BookingStats:
        bookings = self._read()
        return BookingStats(
            total=len(bookings),
            today=sum(1 for b in bookings if b.date == today),
            upcoming=sum(1 for b in bookings if b.date >= today),
            past=sum(1 for b in bookings if b.date < today),
        )
