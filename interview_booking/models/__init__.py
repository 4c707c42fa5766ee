from interview_booking.db.base import Base
from interview_booking.models.scheduling import AvailabilityRule, Booking, Interviewer, TimeSlot

__all__ = [
    "Base",
    "AvailabilityRule",
    "Booking",
    "Interviewer",
    "TimeSlot",
]
