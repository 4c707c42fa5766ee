from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.core.config import settings
from interview_booking.core.datetime_utils import Clock, SystemClock
from interview_booking.db.session import get_session


async def get_db_session() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def get_clock() -> Clock:
    return SystemClock(settings.tz)
