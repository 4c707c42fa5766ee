from __future__ import annotations

from datetime import datetime, time

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from interview_booking.constants import SLOT_STATUS_AVAILABLE, SLOT_STATUS_VALUES
from interview_booking.core.datetime_utils import DAYS_OF_WEEK
from interview_booking.db.base import Base


class Interviewer(Base):
    __tablename__ = "interviewer"

    interviewer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    max_interviews_per_week: Mapped[int] = mapped_column(Integer, nullable=False)
    # Guards the interviewer's own fields only; slot contention uses TimeSlot.version.
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AvailabilityRule(Base):
    __tablename__ = "availability_rule"

    rule_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    interviewer_id: Mapped[int] = mapped_column(ForeignKey("interviewer.interviewer_id"), nullable=False, index=True)
    day_of_week: Mapped[str] = mapped_column(Enum(*DAYS_OF_WEEK, name="day_of_week_enum"), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    slot_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)


class TimeSlot(Base):
    __tablename__ = "time_slot"
    __table_args__ = (
        Index("ix_time_slot_interviewer_start", "interviewer_id", "slot_start_at"),
        Index("ix_time_slot_status_cursor", "status", "slot_start_at", "slot_id"),
    )

    slot_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    interviewer_id: Mapped[int] = mapped_column(ForeignKey("interviewer.interviewer_id"), nullable=False)
    slot_start_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(*SLOT_STATUS_VALUES, name="slot_status_enum"),
        nullable=False,
        default=SLOT_STATUS_AVAILABLE,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Booking(Base):
    __tablename__ = "booking"

    booking_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slot_id: Mapped[int] = mapped_column(ForeignKey("time_slot.slot_id"), unique=True, nullable=False)
    candidate_name: Mapped[str] = mapped_column(String(255), nullable=False)
    candidate_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
