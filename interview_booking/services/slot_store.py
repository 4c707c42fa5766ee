from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.constants import SLOT_STATUS_AVAILABLE, SLOT_STATUS_BOOKED
from interview_booking.core.cursor import Cursor
from interview_booking.core.errors import ConcurrentModification
from interview_booking.models.scheduling import AvailabilityRule, Booking, Interviewer, TimeSlot


# Levels the SQLite driver accepts; any other level runs as SQLite's native SERIALIZABLE.
SQLITE_ISOLATION_LEVELS = frozenset({"READ UNCOMMITTED", "SERIALIZABLE", "AUTOCOMMIT"})


def resolve_isolation_level(dialect_name: str, isolation_level: str | None) -> str | None:
    if not isolation_level or not isolation_level.strip():
        return None
    level = isolation_level.strip().upper()
    if dialect_name == "sqlite" and level not in SQLITE_ISOLATION_LEVELS:
        return "SERIALIZABLE"
    return level


class SlotStore:
    """Read/write contract the booking core needs from storage.

    Every write that changes slot ownership goes through ``transition_slot``,
    which only succeeds when the stored version still equals the version the
    caller read.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def pin_isolation_level(self, isolation_level: str | None) -> None:
        # Must run before the first statement of the transaction.
        level = resolve_isolation_level(self.session.get_bind().dialect.name, isolation_level)
        if level:
            await self.session.connection(execution_options={"isolation_level": level})

    async def get_slot(self, slot_id: int) -> TimeSlot | None:
        result = await self.session.execute(
            select(TimeSlot).where(TimeSlot.slot_id == slot_id).execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def get_booking(self, booking_id: int) -> Booking | None:
        result = await self.session.execute(
            select(Booking).where(Booking.booking_id == booking_id).execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def get_interviewer(self, interviewer_id: int) -> Interviewer | None:
        result = await self.session.execute(
            select(Interviewer)
            .where(Interviewer.interviewer_id == interviewer_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def get_interviewer_by_email(self, email: str) -> Interviewer | None:
        result = await self.session.execute(select(Interviewer).where(Interviewer.email == email))
        return result.scalars().one_or_none()

    async def list_rules(self, interviewer_id: int) -> list[AvailabilityRule]:
        result = await self.session.execute(
            select(AvailabilityRule)
            .where(AvailabilityRule.interviewer_id == interviewer_id)
            .order_by(AvailabilityRule.rule_id.asc())
        )
        return list(result.scalars().all())

    async def replace_rules(self, interviewer_id: int, rules: list[AvailabilityRule]) -> list[AvailabilityRule]:
        await self.session.execute(delete(AvailabilityRule).where(AvailabilityRule.interviewer_id == interviewer_id))
        for rule in rules:
            rule.interviewer_id = interviewer_id
        self.session.add_all(rules)
        await self.session.flush()
        return rules

    async def has_active_booking(self, candidate_email: str) -> bool:
        result = await self.session.execute(
            select(func.count(Booking.booking_id))
            .join(TimeSlot, TimeSlot.slot_id == Booking.slot_id)
            .where(Booking.candidate_email == candidate_email, TimeSlot.status == SLOT_STATUS_BOOKED)
        )
        return (result.scalar_one() or 0) > 0

    async def count_booked_between(self, interviewer_id: int, start: datetime, end: datetime) -> int:
        result = await self.session.execute(
            select(func.count(TimeSlot.slot_id)).where(
                TimeSlot.interviewer_id == interviewer_id,
                TimeSlot.status == SLOT_STATUS_BOOKED,
                TimeSlot.slot_start_at >= start,
                TimeSlot.slot_start_at < end,
            )
        )
        return result.scalar_one() or 0

    async def list_slot_starts_between(self, interviewer_id: int, start: datetime, end: datetime) -> set[datetime]:
        result = await self.session.execute(
            select(TimeSlot.slot_start_at).where(
                TimeSlot.interviewer_id == interviewer_id,
                TimeSlot.slot_start_at >= start,
                TimeSlot.slot_start_at < end,
            )
        )
        return set(result.scalars().all())

    async def add_slots(self, slots: list[TimeSlot]) -> list[TimeSlot]:
        self.session.add_all(slots)
        await self.session.flush()
        return slots

    async def add_booking(self, booking: Booking) -> Booking:
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def transition_slot(self, slot: TimeSlot, *, expected_version: int, new_status: str, now: datetime) -> TimeSlot:
        result = await self.session.execute(
            update(TimeSlot)
            .where(TimeSlot.slot_id == slot.slot_id, TimeSlot.version == expected_version)
            .values(status=new_status, version=TimeSlot.version + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrentModification("Slot was modified by another transaction. Please try again.")
        await self.session.refresh(slot)
        return slot

    async def page_available(self, after: Cursor | None, limit: int) -> list[TimeSlot]:
        stmt = select(TimeSlot).where(TimeSlot.status == SLOT_STATUS_AVAILABLE)
        if after is not None:
            stmt = stmt.where(
                or_(
                    TimeSlot.slot_start_at > after.slot_start_at,
                    and_(TimeSlot.slot_start_at == after.slot_start_at, TimeSlot.slot_id > after.slot_id),
                )
            )
        stmt = stmt.order_by(TimeSlot.slot_start_at.asc(), TimeSlot.slot_id.asc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
