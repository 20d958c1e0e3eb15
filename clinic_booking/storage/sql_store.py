import os
from typing import List, Optional

from sqlalchemy import String, create_engine, event, func, or_, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from clinic_booking.core.errors import SlotTakenError, StorageError
from clinic_booking.core.logger import logger
from clinic_booking.models.booking import Booking, BookingStats
from clinic_booking.storage.base import BookingStore
from clinic_booking.storage.sql_models import Base, BookingRecord

SLOT_CONSTRAINT_COLUMNS = "bookings.date, bookings.time"


def _py_lower(value):
    # SQLite lower() only folds ASCII
    return value.lower() if value is not None else None


def _to_booking(record: BookingRecord) -> Booking:
    return Booking(
        id=record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        email=record.email,
        phone=record.phone,
        service=record.service,
        date=record.date,
        time=record.time,
        notes=record.notes or "",
        price=record.price or "",
        status=record.status or "confirmed",
        created_at=record.created_at,
    )


def _to_record(booking: Booking) -> BookingRecord:
    return BookingRecord(
        id=booking.id,
        first_name=booking.first_name,
        last_name=booking.last_name,
        email=booking.email,
        phone=booking.phone,
        service=booking.service,
        date=booking.date,
        time=booking.time,
        notes=booking.notes or None,
        price=booking.price or None,
        status=booking.status,
        created_at=booking.created_at,
    )


class SqlBookingStore(BookingStore):
    """
    SQLite backend. The unique (date, time) constraint makes insert an
    atomic conditional insert across processes too.
    """

    def __init__(self, database_url: str):
        url = make_url(database_url)
        is_sqlite = url.drivername.startswith("sqlite")
        if is_sqlite and url.database and url.database != ":memory:":
            folder = os.path.dirname(os.path.abspath(url.database))
            os.makedirs(folder, exist_ok=True)

        self.engine = create_engine(database_url, connect_args={"check_same_thread": False, "timeout": 30} if is_sqlite else {})
        if is_sqlite:
            event.listen(self.engine, "connect", self._register_functions)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error(f"❌ Database initialization failed for {database_url}: {e}")
            raise StorageError("Could not initialize database") from e
        logger.info("✅ Connected to SQLite database")

    @staticmethod
    def _register_functions(dbapi_connection, connection_record):
        dbapi_connection.create_function("py_lower", 1, _py_lower, deterministic=True)

    def _all(self, statement) -> List[Booking]:
        try:
            with self.SessionLocal() as session:
                return [_to_booking(r) for r in session.scalars(statement).all()]
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (query): {e}")
            raise StorageError("Could not read bookings") from e

    def list(self) -> List[Booking]:
        return self._all(
            select(BookingRecord).order_by(BookingRecord.date.desc(), BookingRecord.time.desc())
        )

    def list_by_date(self, date: str) -> List[Booking]:
        return self._all(
            select(BookingRecord).where(BookingRecord.date == date).order_by(BookingRecord.time)
        )

    def exists(self, date: str, time: str) -> bool:
        try:
            with self.SessionLocal() as session:
                count = session.scalar(
                    select(func.count()).select_from(BookingRecord).where(
                        BookingRecord.date == date, BookingRecord.time == time
                    )
                )
                return count > 0
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (exists): {e}")
            raise StorageError("Could not read bookings") from e

    def get(self, booking_id: str) -> Optional[Booking]:
        try:
            with self.SessionLocal() as session:
                record = session.get(BookingRecord, booking_id)
                return _to_booking(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (get): {e}")
            raise StorageError("Could not read bookings") from e

    def insert(self, booking: Booking) -> Booking:
        try:
            with self.SessionLocal() as session:
                session.add(_to_record(booking))
                session.commit()
        except IntegrityError as e:
            if SLOT_CONSTRAINT_COLUMNS not in str(e.orig):
                logger.error(f"❌ DB Error (insert): {e}")
                raise StorageError("Could not save booking") from e
            raise SlotTakenError(f"Slot {booking.date} {booking.time} is already booked") from e
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (insert): {e}")
            raise StorageError("Could not save booking") from e
        return booking

    def delete(self, booking_id: str) -> bool:
        try:
            with self.SessionLocal() as session:
                record = session.get(BookingRecord, booking_id)
                if record is None:
                    return False
                session.delete(record)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (delete): {e}")
            raise StorageError("Could not delete booking") from e

    def search(self, query: str) -> List[Booking]:
        needle = query.strip().lower()
        columns = (BookingRecord.first_name, BookingRecord.last_name, BookingRecord.email, BookingRecord.phone)
        return self._all(
            select(BookingRecord)
            .where(or_(*(func.py_lower(column, type_=String).contains(needle, autoescape=True) for column in columns)))
            .order_by(BookingRecord.date.desc(), BookingRecord.time.desc())
        )

    def stats(self, today: str) -> BookingStats:
        def count(*criteria):
            return session.scalar(select(func.count()).select_from(BookingRecord).where(*criteria))

        try:
            with self.SessionLocal() as session:
                return BookingStats(
                    total=count(),
                    today=count(BookingRecord.date == today),
                    upcoming=count(BookingRecord.date >= today),
                    past=count(BookingRecord.date < today),
                )
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error (stats): {e}")
            raise StorageError("Could not read bookings") from e

    def close(self) -> None:
        self.engine.dispose()
