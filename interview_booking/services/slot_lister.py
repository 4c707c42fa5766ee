from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.core.config import settings
from interview_booking.core.cursor import decode_cursor, encode_cursor
from interview_booking.models.scheduling import TimeSlot
from interview_booking.services.slot_store import SlotStore


@dataclass(frozen=True)
class SlotPage:
    items: list[TimeSlot]
    next_cursor: str | None
    has_more: bool
    page_size: int


def resolve_page_size(page_size: int | None) -> int:
    if page_size is None or page_size <= 0:
        return settings.default_page_size
    return min(page_size, settings.max_page_size)


async def list_available_slots(session: AsyncSession, *, cursor: str | None, page_size: int | None) -> SlotPage:
    """One page of AVAILABLE slots ordered by (slot_start_at, slot_id).

    Each page is read fresh, so slots inserted ahead of the cursor between
    calls show up on later pages and already-returned ones never repeat.
    """
    size = resolve_page_size(page_size)
    after = decode_cursor(cursor) if cursor else None

    rows = await SlotStore(session).page_available(after, size + 1)
    has_more = len(rows) > size
    items = rows[:size]

    next_cursor = None
    if has_more:
        last = items[-1]
        next_cursor = encode_cursor(last.slot_start_at, last.slot_id)
    return SlotPage(items=items, next_cursor=next_cursor, has_more=has_more, page_size=size)
