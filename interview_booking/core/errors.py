from __future__ import annotations


class BookingError(Exception):
    """Base class for domain failures surfaced to the boundary layer."""

    code = "booking_error"
    retryable = False

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class SlotNotFound(BookingError):
    code = "slot_not_found"


class BookingNotFound(BookingError):
    code = "booking_not_found"


class InterviewerNotFound(BookingError):
    code = "interviewer_not_found"


class SlotUnavailable(BookingError):
    code = "slot_unavailable"


class DuplicateActiveBooking(BookingError):
    code = "duplicate_active_booking"


class CapacityExceeded(BookingError):
    code = "capacity_exceeded"


class CandidateMismatch(BookingError):
    code = "candidate_mismatch"


class ConcurrentModification(BookingError):
    code = "concurrent_modification"
    retryable = True


class InvalidCursor(BookingError):
    code = "invalid_cursor"


NOT_FOUND_ERRORS: tuple[type[BookingError], ...] = (SlotNotFound, BookingNotFound, InterviewerNotFound)
