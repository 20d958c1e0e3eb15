from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from clinic_booking.api.deps import get_booking_service
from clinic_booking.models.booking import (
    AvailableTimesResponse,
    Booking,
    BookingCreatedResponse,
    BookingRequest,
    BookingStats,
    BookingSummary,
    MessageResponse,
)
from clinic_booking.services.booking_service import BookingService

router = APIRouter()

@router.get("/available-times", response_model=AvailableTimesResponse)
async def available_times(
    date: Optional[str] = Query(None),
    booking_service: BookingService = Depends(get_booking_service),
):
    return await booking_service.get_available_times(date)

@router.post("/bookings", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    req: BookingRequest,
    background_tasks: BackgroundTasks,
    booking_service: BookingService = Depends(get_booking_service),
):
    booking = await booking_service.create_booking(req, background_tasks)
    return BookingCreatedResponse(
        message="Rezerwacja została pomyślnie utworzona",
        booking=BookingSummary(id=booking.id, date=booking.date, time=booking.time, service=booking.service),
    )

# Admin routes (unauthenticated)

@router.get("/bookings", response_model=List[Booking])
async def list_bookings(booking_service: BookingService = Depends(get_booking_service)):
    return await booking_service.list_bookings()

@router.get("/bookings/search", response_model=List[Booking])
async def search_bookings(
    q: Optional[str] = Query(None),
    booking_service: BookingService = Depends(get_booking_service),
):
    return await booking_service.search_bookings(q)

@router.get("/bookings/stats", response_model=BookingStats)
async def booking_stats(booking_service: BookingService = Depends(get_booking_service)):
    return await booking_service.get_stats()

@router.get("/bookings/{booking_id}", response_model=Booking)
async def get_booking(booking_id: str, booking_service: BookingService = Depends(get_booking_service)):
    return await booking_service.get_booking(booking_id)

@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
async def delete_booking(booking_id: str, booking_service: BookingService = Depends(get_booking_service)):
    await booking_service.delete_booking(booking_id)
    return MessageResponse(message="Rezerwacja została usunięta")
