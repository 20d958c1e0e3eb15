from abc import ABC, abstractmethod
from typing import List, Optional

from clinic_booking.models.booking import Booking, BookingStats


class BookingStore(ABC):
    """
    Persistence interface shared by the JSON and SQLite backends.

    `insert` is a conditional insert: implementations must check the
    (date, time) slot and write in one step and raise SlotTakenError when the
    slot is already booked. I/O and database failures surface as StorageError.
    """

    @abstractmethod
    def list(self) -> List[Booking]: ...

    @abstractmethod
    def list_by_date(self, date: str) -> List[Booking]: ...

    @abstractmethod
    def exists(self, date: str, time: str) -> bool: ...

    @abstractmethod
    def get(self, booking_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def insert(self, booking: Booking) -> Booking: ...

    @abstractmethod
    def delete(self, booking_id: str) -> bool: ...

    @abstractmethod
    def search(self, query: str) -> List[Booking]: ...

    @abstractmethod
    def stats(self, today: str) -> BookingStats: ...

    def close(self) -> None:
        pass
