from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import time

from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.core.config import settings
from interview_booking.core.datetime_utils import Clock
from interview_booking.core.errors import InterviewerNotFound
from interview_booking.models.scheduling import AvailabilityRule, Interviewer, TimeSlot
from interview_booking.services.slot_generator import generate_slots
from interview_booking.services.slot_store import SlotStore

logger = logging.getLogger("ib.interviewers")


@dataclass(frozen=True)
class RuleSpec:
    day_of_week: str
    start_time: time
    end_time: time
    slot_duration_minutes: int


@dataclass
class InterviewerView:
    interviewer: Interviewer
    rules: list[AvailabilityRule] = field(default_factory=list)
    generated_slots: list[TimeSlot] = field(default_factory=list)


async def submit_availability(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    max_interviews_per_week: int,
    rules: list[RuleSpec],
    clock: Clock,
) -> InterviewerView:
    """Upsert the interviewer, replace its rules wholesale and generate slots in one transaction."""
    logger.info("availability_submitted", extra={"email": email, "rules": len(rules)})
    async with session.begin():
        store = SlotStore(session)
        now = clock.now()
        interviewer = await store.get_interviewer_by_email(email)
        if interviewer is None:
            interviewer = Interviewer(
                name=name,
                email=email,
                max_interviews_per_week=max_interviews_per_week,
                version=1,
                created_at=now,
                updated_at=now,
            )
            session.add(interviewer)
        else:
            interviewer.name = name
            interviewer.max_interviews_per_week = max_interviews_per_week
            interviewer.version += 1
            interviewer.updated_at = now
        await session.flush()

        saved_rules = await store.replace_rules(
            interviewer.interviewer_id,
            [
                AvailabilityRule(
                    day_of_week=rule.day_of_week,
                    start_time=rule.start_time,
                    end_time=rule.end_time,
                    slot_duration_minutes=rule.slot_duration_minutes,
                )
                for rule in rules
            ],
        )
        generated = await generate_slots(
            session,
            interviewer=interviewer,
            rules=saved_rules,
            horizon_start=now.date(),
            horizon_weeks=settings.generation_weeks,
            clock=clock,
        )

    logger.info(
        "availability_saved",
        extra={"interviewer_id": interviewer.interviewer_id, "generated_slots": len(generated)},
    )
    return InterviewerView(interviewer=interviewer, rules=saved_rules, generated_slots=generated)


async def get_interviewer(session: AsyncSession, interviewer_id: int) -> InterviewerView:
    store = SlotStore(session)
    interviewer = await store.get_interviewer(interviewer_id)
    if interviewer is None:
        raise InterviewerNotFound(f"Interviewer not found with id: {interviewer_id}")
    return InterviewerView(interviewer=interviewer, rules=await store.list_rules(interviewer_id))


async def get_interviewer_by_email(session: AsyncSession, email: str) -> InterviewerView:
    store = SlotStore(session)
    interviewer = await store.get_interviewer_by_email(email)
    if interviewer is None:
        raise InterviewerNotFound(f"Interviewer not found with email: {email}")
    return InterviewerView(interviewer=interviewer, rules=await store.list_rules(interviewer.interviewer_id))
