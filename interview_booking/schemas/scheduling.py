from __future__ import annotations

from datetime import datetime, time
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from interview_booking.core.datetime_utils import DAYS_OF_WEEK

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class BookSlotIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    time_slot_id: int = Field(ge=1)
    candidate_name: str = Field(min_length=1, max_length=255)
    candidate_email: EmailStr


class UpdateBookingIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: int = Field(ge=1)
    new_time_slot_id: int = Field(ge=1)
    candidate_name: str = Field(min_length=1, max_length=255)
    candidate_email: EmailStr


class BookingOut(BaseModel):
    booking_id: int
    time_slot_id: int = Field(validation_alias="slot_id")
    candidate_name: str
    candidate_email: str
    booking_date_time: datetime = Field(validation_alias="created_at")
    updated_at: datetime
    slot_date_time: datetime = Field(validation_alias="slot_start_at")

    class Config:
        from_attributes = True
        populate_by_name = True


class AvailabilityRuleIn(BaseModel):
    day_of_week: str
    start_time: time
    end_time: time
    slot_duration_minutes: int = Field(ge=1, le=24 * 60)

    @field_validator("day_of_week")
    @classmethod
    def _normalize_day(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in DAYS_OF_WEEK:
            raise ValueError(f"day_of_week must be one of {', '.join(DAYS_OF_WEEK)}")
        return normalized

    @model_validator(mode="after")
    def _validate_window(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class InterviewerAvailabilityIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    max_interviews_per_week: int = Field(ge=1)
    availability_slots: list[AvailabilityRuleIn]


class AvailabilityRuleOut(BaseModel):
    rule_id: int
    day_of_week: str
    start_time: time
    end_time: time
    slot_duration_minutes: int

    class Config:
        from_attributes = True


class InterviewerOut(BaseModel):
    interviewer_id: int
    name: str
    email: str
    max_interviews_per_week: int
    version: int
    availability_slots: list[AvailabilityRuleOut] = []
    generated_slots: int = 0


class TimeSlotOut(BaseModel):
    id: int = Field(validation_alias="slot_id")
    interviewer_id: int
    slot_date_time: datetime = Field(validation_alias="slot_start_at")
    status: str

    class Config:
        from_attributes = True
        populate_by_name = True


class PagedTimeSlotOut(BaseModel):
    time_slots: list[TimeSlotOut]
    next_cursor: str | None = None
    has_next_page: bool
    page_size: int
