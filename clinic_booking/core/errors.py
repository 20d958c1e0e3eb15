"""
Booking error taxonomy.

Each error carries the HTTP status the API answers with, so routes can simply
let them propagate to the exception handler registered in main.py.
"""


class BookingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    status_code = 400


class BookingNotFoundError(BookingError):
    status_code = 404


class SlotTakenError(BookingError):
    status_code = 409


class StorageError(BookingError):
    status_code = 500
