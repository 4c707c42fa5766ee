from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.core.datetime_utils import Clock
from interview_booking.deps import get_clock, get_db_session
from interview_booking.schemas.scheduling import ApiResponse, BookingOut, BookSlotIn, UpdateBookingIn
from interview_booking.services.booking_engine import claim_slot, get_booking, transfer_booking

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post("", response_model=ApiResponse[BookingOut], status_code=status.HTTP_201_CREATED)
async def book_slot(
    payload: BookSlotIn,
    session: AsyncSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    booking = await claim_slot(
        session,
        slot_id=payload.time_slot_id,
        candidate_name=payload.candidate_name,
        candidate_email=payload.candidate_email,
        clock=clock,
    )
    return ApiResponse[BookingOut](message="Slot booked successfully", data=BookingOut.model_validate(booking))


@router.put("", response_model=ApiResponse[BookingOut])
async def update_booking(
    payload: UpdateBookingIn,
    session: AsyncSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    booking = await transfer_booking(
        session,
        booking_id=payload.booking_id,
        new_slot_id=payload.new_time_slot_id,
        candidate_name=payload.candidate_name,
        candidate_email=payload.candidate_email,
        clock=clock,
    )
    return ApiResponse[BookingOut](message="Booking updated successfully", data=BookingOut.model_validate(booking))


@router.get("/{booking_id}", response_model=ApiResponse[BookingOut])
async def read_booking(booking_id: int, session: AsyncSession = Depends(get_db_session)):
    booking = await get_booking(session, booking_id)
    return ApiResponse[BookingOut](message="Booking retrieved successfully", data=BookingOut.model_validate(booking))
