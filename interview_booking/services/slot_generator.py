from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.constants import SLOT_STATUS_AVAILABLE
from interview_booking.core.datetime_utils import Clock, day_name, enumerate_slot_starts, iter_horizon_days
from interview_booking.models.scheduling import AvailabilityRule, Interviewer, TimeSlot
from interview_booking.services.slot_store import SlotStore

logger = logging.getLogger("ib.slots")


def expand_rules(
    rules: Iterable[AvailabilityRule],
    *,
    horizon_start: date,
    horizon_weeks: int,
    now: datetime,
) -> list[datetime]:
    """Concrete future slot starts for every rule over the horizon, ascending and unique."""
    rules = list(rules)
    starts: set[datetime] = set()
    for day in iter_horizon_days(horizon_start, horizon_weeks):
        weekday = day_name(day)
        for rule in rules:
            if rule.day_of_week != weekday:
                continue
            for start_at in enumerate_slot_starts(day, rule.start_time, rule.end_time, rule.slot_duration_minutes):
                if start_at > now:
                    starts.add(start_at)
    return sorted(starts)


async def generate_slots(
    session: AsyncSession,
    *,
    interviewer: Interviewer,
    rules: Iterable[AvailabilityRule],
    horizon_start: date,
    horizon_weeks: int,
    clock: Clock,
) -> list[TimeSlot]:
    """Persist AVAILABLE slots for starts the interviewer does not already have.

    Runs inside the caller's transaction when one is open so that a whole
    generation pass becomes visible at once; otherwise opens its own.
    """
    if session.in_transaction():
        return await _generate(
            session,
            interviewer=interviewer,
            rules=rules,
            horizon_start=horizon_start,
            horizon_weeks=horizon_weeks,
            clock=clock,
        )
    async with session.begin():
        return await _generate(
            session,
            interviewer=interviewer,
            rules=rules,
            horizon_start=horizon_start,
            horizon_weeks=horizon_weeks,
            clock=clock,
        )


async def _generate(
    session: AsyncSession,
    *,
    interviewer: Interviewer,
    rules: Iterable[AvailabilityRule],
    horizon_start: date,
    horizon_weeks: int,
    clock: Clock,
) -> list[TimeSlot]:
    rules = list(rules)
    if not rules:
        logger.warning("no_availability_rules", extra={"interviewer_id": interviewer.interviewer_id})
        return []

    now = clock.now()
    candidates = expand_rules(rules, horizon_start=horizon_start, horizon_weeks=horizon_weeks, now=now)
    if not candidates:
        return []

    store = SlotStore(session)
    window_start = datetime.combine(horizon_start, time.min)
    window_end = window_start + timedelta(weeks=horizon_weeks)
    existing = await store.list_slot_starts_between(interviewer.interviewer_id, window_start, window_end)

    new_slots = [
        TimeSlot(
            interviewer_id=interviewer.interviewer_id,
            slot_start_at=start_at,
            status=SLOT_STATUS_AVAILABLE,
            version=1,
            created_at=now,
            updated_at=now,
        )
        for start_at in candidates
        if start_at not in existing
    ]
    if new_slots:
        await store.add_slots(new_slots)
        logger.info(
            "slots_generated",
            extra={
                "interviewer_id": interviewer.interviewer_id,
                "created": len(new_slots),
                "skipped_existing": len(candidates) - len(new_slots),
            },
        )
    return new_slots
