from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from interview_booking.core.datetime_utils import Clock
from interview_booking.deps import get_clock, get_db_session
from interview_booking.schemas.scheduling import (
    ApiResponse,
    AvailabilityRuleOut,
    InterviewerAvailabilityIn,
    InterviewerOut,
)
from interview_booking.services.interviewer_service import (
    InterviewerView,
    RuleSpec,
    get_interviewer,
    get_interviewer_by_email,
    submit_availability,
)

router = APIRouter(prefix="/api/v1/interviewers", tags=["interviewers"])


def _to_out(view: InterviewerView) -> InterviewerOut:
    interviewer = view.interviewer
    return InterviewerOut(
        interviewer_id=interviewer.interviewer_id,
        name=interviewer.name,
        email=interviewer.email,
        max_interviews_per_week=interviewer.max_interviews_per_week,
        version=interviewer.version,
        availability_slots=[AvailabilityRuleOut.model_validate(rule) for rule in view.rules],
        generated_slots=len(view.generated_slots),
    )


@router.post("/availability", response_model=ApiResponse[InterviewerOut], status_code=status.HTTP_201_CREATED)
async def create_or_update_availability(
    payload: InterviewerAvailabilityIn,
    session: AsyncSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    view = await submit_availability(
        session,
        name=payload.name,
        email=payload.email,
        max_interviews_per_week=payload.max_interviews_per_week,
        rules=[
            RuleSpec(
                day_of_week=rule.day_of_week,
                start_time=rule.start_time,
                end_time=rule.end_time,
                slot_duration_minutes=rule.slot_duration_minutes,
            )
            for rule in payload.availability_slots
        ],
        clock=clock,
    )
    return ApiResponse[InterviewerOut](
        message="Interviewer availability created/updated successfully",
        data=_to_out(view),
    )


@router.get("/email/{email}", response_model=ApiResponse[InterviewerOut])
async def read_interviewer_by_email(email: str, session: AsyncSession = Depends(get_db_session)):
    view = await get_interviewer_by_email(session, email)
    return ApiResponse[InterviewerOut](message="Interviewer retrieved successfully", data=_to_out(view))


@router.get("/{interviewer_id}", response_model=ApiResponse[InterviewerOut])
async def read_interviewer(interviewer_id: int, session: AsyncSession = Depends(get_db_session)):
    view = await get_interviewer(session, interviewer_id)
    return ApiResponse[InterviewerOut](message="Interviewer retrieved successfully", data=_to_out(view))
