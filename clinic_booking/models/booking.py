from typing import Optional, List
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

class CamelModel(BaseModel):
    # camelCase on the wire and in the JSON document, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# --- Stored entity ---

class Booking(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    service: str
    date: str
    time: str
    notes: str = ""
    price: str = ""
    status: str = "confirmed"
    created_at: str = Field(default_factory=utc_now_iso)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)

# --- Incoming Request Models ---

class BookingRequest(CamelModel):
    # Everything optional here; missing fields are reported by BookingService
    # as a single 400 instead of a pydantic 422.
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    service: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    price: Optional[str] = None

# --- Outgoing Response Models ---

class AvailableTimesResponse(CamelModel):
    date: str
    available_times: List[str]
    booked_times: List[str]

class BookingSummary(CamelModel):
    id: str
    date: str
    time: str
    service: str

class BookingCreatedResponse(CamelModel):
    success: bool = True
    message: str
    booking: BookingSummary

class MessageResponse(CamelModel):
    success: bool = True
    message: str

class BookingStats(CamelModel):
    total: int
    today: int
    upcoming: int
    past: int
