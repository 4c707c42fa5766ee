from datetime import datetime, time

import pytest

from interview_booking.core.errors import InterviewerNotFound
from interview_booking.services.interviewer_service import (
    RuleSpec,
    get_interviewer,
    get_interviewer_by_email,
    submit_availability,
)

MONDAY_MORNING = RuleSpec("MONDAY", time(9, 0), time(10, 0), 30)
WEDNESDAY_AFTERNOON = RuleSpec("WEDNESDAY", time(14, 0), time(16, 0), 60)


async def _submit(session_factory, clock, rules, *, name="Rajesh Kumar", capacity=3):
    async with session_factory() as session:
        return await submit_availability(
            session,
            name=name,
            email="rajesh@example.com",
            max_interviews_per_week=capacity,
            rules=rules,
            clock=clock,
        )


async def test_first_submission_creates_interviewer_rules_and_slots(session_factory, seed, clock):
    view = await _submit(session_factory, clock, [MONDAY_MORNING])

    assert view.interviewer.interviewer_id is not None
    assert view.interviewer.version == 1
    assert [rule.day_of_week for rule in view.rules] == ["MONDAY"]
    assert [slot.slot_start_at for slot in view.generated_slots] == [
        datetime(2030, 1, 7, 9, 0),
        datetime(2030, 1, 7, 9, 30),
        datetime(2030, 1, 14, 9, 0),
        datetime(2030, 1, 14, 9, 30),
    ]


async def test_resubmission_replaces_rules_and_keeps_existing_slots(session_factory, seed, clock):
    first = await _submit(session_factory, clock, [MONDAY_MORNING])
    second = await _submit(session_factory, clock, [WEDNESDAY_AFTERNOON], name="Rajesh K.", capacity=5)

    assert second.interviewer.interviewer_id == first.interviewer.interviewer_id
    assert second.interviewer.name == "Rajesh K."
    assert second.interviewer.max_interviews_per_week == 5
    assert second.interviewer.version == 2
    assert [rule.day_of_week for rule in second.rules] == ["WEDNESDAY"]
    assert len(second.generated_slots) == 4

    async with session_factory() as session:
        stored = await get_interviewer(session, first.interviewer.interviewer_id)
    assert [rule.day_of_week for rule in stored.rules] == ["WEDNESDAY"]
    assert len(await seed.slots(first.interviewer)) == 8


async def test_resubmitting_same_rules_is_idempotent(session_factory, seed, clock):
    await _submit(session_factory, clock, [MONDAY_MORNING])
    again = await _submit(session_factory, clock, [MONDAY_MORNING])

    assert again.generated_slots == []
    assert len(await seed.slots(again.interviewer)) == 4


async def test_submission_without_rules_generates_nothing(session_factory, seed, clock):
    view = await _submit(session_factory, clock, [])

    assert view.rules == []
    assert view.generated_slots == []


async def test_lookup_by_id_and_email(session_factory, clock):
    created = await _submit(session_factory, clock, [MONDAY_MORNING])

    async with session_factory() as session:
        by_id = await get_interviewer(session, created.interviewer.interviewer_id)
    async with session_factory() as session:
        by_email = await get_interviewer_by_email(session, "rajesh@example.com")

    assert by_id.interviewer.email == "rajesh@example.com"
    assert by_email.interviewer.interviewer_id == created.interviewer.interviewer_id
    assert len(by_email.rules) == 1


async def test_unknown_interviewer(session_factory):
    async with session_factory() as session:
        with pytest.raises(InterviewerNotFound):
            await get_interviewer(session, 42)
        with pytest.raises(InterviewerNotFound):
            await get_interviewer_by_email(session, "nobody@example.com")
