from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.constants import SLOT_STATUS_AVAILABLE, SLOT_STATUS_BOOKED
from interview_booking.core.config import settings
from interview_booking.core.datetime_utils import Clock, week_bounds
from interview_booking.core.errors import (
    BookingNotFound,
    CandidateMismatch,
    CapacityExceeded,
    ConcurrentModification,
    DuplicateActiveBooking,
    InterviewerNotFound,
    SlotNotFound,
    SlotUnavailable,
)
from interview_booking.models.scheduling import Booking, TimeSlot
from interview_booking.services.slot_store import SlotStore

logger = logging.getLogger("ib.booking")


@dataclass(frozen=True)
class BookingView:
    booking_id: int
    slot_id: int
    candidate_name: str
    candidate_email: str
    created_at: datetime
    updated_at: datetime
    slot_start_at: datetime


def _to_view(booking: Booking, slot: TimeSlot) -> BookingView:
    return BookingView(
        booking_id=booking.booking_id,
        slot_id=slot.slot_id,
        candidate_name=booking.candidate_name,
        candidate_email=booking.candidate_email,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
        slot_start_at=slot.slot_start_at,
    )


async def _load_claimable_slot(store: SlotStore, slot_id: int) -> TimeSlot:
    slot = await store.get_slot(slot_id)
    if slot is None:
        raise SlotNotFound(f"Time slot not found with id: {slot_id}")
    if slot.status != SLOT_STATUS_AVAILABLE:
        raise SlotUnavailable("Time slot is not available")
    return slot


async def _ensure_weekly_capacity(store: SlotStore, slot: TimeSlot) -> None:
    interviewer = await store.get_interviewer(slot.interviewer_id)
    if interviewer is None:
        raise InterviewerNotFound(f"Interviewer not found with id: {slot.interviewer_id}")
    week_start, week_end = week_bounds(slot.slot_start_at)
    booked = await store.count_booked_between(interviewer.interviewer_id, week_start, week_end)
    if booked >= interviewer.max_interviews_per_week:
        raise CapacityExceeded(
            f"Interviewer has reached maximum interviews per week limit ({interviewer.max_interviews_per_week})"
        )


async def claim_slot(
    session: AsyncSession,
    *,
    slot_id: int,
    candidate_name: str,
    candidate_email: str,
    clock: Clock,
) -> BookingView:
    """Book an AVAILABLE slot for a candidate holding no other active booking.

    The slot flip and the booking insert commit together or not at all. A
    version mismatch on the flip raises ConcurrentModification; retrying is
    left to the caller.
    """
    logger.info("claim_requested", extra={"slot_id": slot_id, "candidate_email": candidate_email})
    try:
        async with session.begin():
            store = SlotStore(session)
            await store.pin_isolation_level(settings.booking_isolation_level)

            if await store.has_active_booking(candidate_email):
                raise DuplicateActiveBooking("Candidate already has an active booking")

            slot = await _load_claimable_slot(store, slot_id)
            read_version = slot.version
            await _ensure_weekly_capacity(store, slot)

            now = clock.now()
            await store.transition_slot(slot, expected_version=read_version, new_status=SLOT_STATUS_BOOKED, now=now)
            booking = await store.add_booking(
                Booking(
                    slot_id=slot.slot_id,
                    candidate_name=candidate_name,
                    candidate_email=candidate_email,
                    created_at=now,
                    updated_at=now,
                )
            )
    except ConcurrentModification:
        logger.warning("claim_conflict", extra={"slot_id": slot_id, "candidate_email": candidate_email})
        raise

    logger.info("slot_claimed", extra={"slot_id": slot_id, "booking_id": booking.booking_id})
    return _to_view(booking, slot)


async def transfer_booking(
    session: AsyncSession,
    *,
    booking_id: int,
    new_slot_id: int,
    candidate_name: str,
    candidate_email: str,
    clock: Clock,
) -> BookingView:
    """Move a booking to another slot, releasing the old one in the same transaction.

    The email equality check is possession-based only; there is no real
    authentication behind it.
    """
    logger.info("transfer_requested", extra={"booking_id": booking_id, "new_slot_id": new_slot_id})
    try:
        async with session.begin():
            store = SlotStore(session)
            await store.pin_isolation_level(settings.booking_isolation_level)

            booking = await store.get_booking(booking_id)
            if booking is None:
                raise BookingNotFound(f"Booking not found with id: {booking_id}")
            if booking.candidate_email != candidate_email:
                raise CandidateMismatch("Candidate email does not match booking")

            now = clock.now()
            old_slot = await store.get_slot(booking.slot_id)
            if old_slot is None:
                raise SlotNotFound(f"Time slot not found with id: {booking.slot_id}")
            await store.transition_slot(
                old_slot, expected_version=old_slot.version, new_status=SLOT_STATUS_AVAILABLE, now=now
            )

            new_slot = await _load_claimable_slot(store, new_slot_id)
            read_version = new_slot.version
            await _ensure_weekly_capacity(store, new_slot)
            await store.transition_slot(new_slot, expected_version=read_version, new_status=SLOT_STATUS_BOOKED, now=now)

            booking.slot_id = new_slot.slot_id
            booking.candidate_name = candidate_name
            booking.updated_at = now
            await session.flush()
    except ConcurrentModification:
        logger.warning("transfer_conflict", extra={"booking_id": booking_id, "new_slot_id": new_slot_id})
        raise

    logger.info(
        "booking_transferred",
        extra={"booking_id": booking_id, "old_slot_id": old_slot.slot_id, "new_slot_id": new_slot.slot_id},
    )
    return _to_view(booking, new_slot)


async def get_booking(session: AsyncSession, booking_id: int) -> BookingView:
    store = SlotStore(session)
    booking = await store.get_booking(booking_id)
    if booking is None:
        raise BookingNotFound(f"Booking not found with id: {booking_id}")
    slot = await store.get_slot(booking.slot_id)
    if slot is None:
        raise SlotNotFound(f"Time slot not found with id: {booking.slot_id}")
    return _to_view(booking, slot)
