from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.deps import get_db_session
from interview_booking.schemas.scheduling import ApiResponse, PagedTimeSlotOut, TimeSlotOut
from interview_booking.services.slot_lister import list_available_slots

router = APIRouter(prefix="/api/v1/time-slots", tags=["time-slots"])


@router.get("/available", response_model=ApiResponse[PagedTimeSlotOut])
async def available_slots(
    cursor: str | None = None,
    page_size: int | None = None,
    session: AsyncSession = Depends(get_db_session),
):
    page = await list_available_slots(session, cursor=cursor, page_size=page_size)
    return ApiResponse[PagedTimeSlotOut](
        message="Available time slots retrieved successfully",
        data=PagedTimeSlotOut(
            time_slots=[TimeSlotOut.model_validate(slot) for slot in page.items],
            next_cursor=page.next_cursor,
            has_next_page=page.has_more,
            page_size=page.page_size,
        ),
    )
