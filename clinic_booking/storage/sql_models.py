"""SQLite table definitions for the relational backend."""

from sqlalchemy import Column, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BookingRecord(Base):
    """One appointment. Column names match the JSON document keys."""
    __tablename__ = "bookings"

    id = Column(String, primary_key=True)
    first_name = Column("firstName", String, nullable=False)
    last_name = Column("lastName", String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    service = Column(String, nullable=False)
    date = Column(String, nullable=False)
    time = Column(String, nullable=False)
    notes = Column(String)
    price = Column(String)
    status = Column(String, default="confirmed")
    created_at = Column("createdAt", String, nullable=False)
    updated_at = Column("updatedAt", String)

    __table_args__ = (
        Index("idx_date", "date"),
        Index("idx_email", "email"),
        UniqueConstraint("date", "time", name="uq_bookings_date_time"),
    )


class AvailabilityRecord(Base):
    """Per-slot schedule overrides. Not read by the booking handlers yet."""
    __tablename__ = "availability"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String, nullable=False)
    time = Column(String, nullable=False)
    available = Column(Integer, default=1)

    __table_args__ = (UniqueConstraint("date", "time"),)


class SettingRecord(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
