import os

os.environ.setdefault("IB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IB_AUTO_CREATE_TABLES", "false")

from datetime import datetime, time

import pytest
from sqlalchemy import select

from interview_booking.constants import SLOT_STATUS_AVAILABLE
from interview_booking.core.datetime_utils import FixedClock
from interview_booking.db.session import build_engine, build_session_factory
from interview_booking.models import AvailabilityRule, Base, Booking, Interviewer, TimeSlot

# Monday 2030-01-07 08:00 local.
NOW = datetime(2030, 1, 7, 8, 0)


class Seeder:
    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    async def interviewer(self, *, email: str = "rajesh@example.com", capacity: int = 5) -> Interviewer:
        async with self.session_factory() as session:
            interviewer = Interviewer(
                name="Rajesh Kumar",
                email=email,
                max_interviews_per_week=capacity,
                version=1,
                created_at=NOW,
                updated_at=NOW,
            )
            session.add(interviewer)
            await session.commit()
            return interviewer

    async def slot(self, interviewer: Interviewer, start_at: datetime, status: str = SLOT_STATUS_AVAILABLE) -> TimeSlot:
        async with self.session_factory() as session:
            slot = TimeSlot(
                interviewer_id=interviewer.interviewer_id,
                slot_start_at=start_at,
                status=status,
                version=1,
                created_at=NOW,
                updated_at=NOW,
            )
            session.add(slot)
            await session.commit()
            return slot

    async def rule(
        self, interviewer: Interviewer, day: str, start: time, end: time, minutes: int
    ) -> AvailabilityRule:
        async with self.session_factory() as session:
            rule = AvailabilityRule(
                interviewer_id=interviewer.interviewer_id,
                day_of_week=day,
                start_time=start,
                end_time=end,
                slot_duration_minutes=minutes,
            )
            session.add(rule)
            await session.commit()
            return rule

    async def fetch_slot(self, slot_id: int) -> TimeSlot:
        async with self.session_factory() as session:
            return await session.get(TimeSlot, slot_id)

    async def bookings(self) -> list[Booking]:
        async with self.session_factory() as session:
            result = await session.execute(select(Booking).order_by(Booking.booking_id))
            return list(result.scalars().all())

    async def slots(self, interviewer: Interviewer | None = None) -> list[TimeSlot]:
        async with self.session_factory() as session:
            stmt = select(TimeSlot).order_by(TimeSlot.slot_start_at, TimeSlot.slot_id)
            if interviewer is not None:
                stmt = stmt.where(TimeSlot.interviewer_id == interviewer.interviewer_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())


@pytest.fixture()
async def async_engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine):
    return build_session_factory(async_engine)


@pytest.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture()
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def make_seeder():
    return Seeder


@pytest.fixture()
async def file_session_factory(tmp_path):
    # Separate connections per session, so writers really contend for the file lock.
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'booking.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()
