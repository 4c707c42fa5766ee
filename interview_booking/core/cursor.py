from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime

from interview_booking.core.config import settings
from interview_booking.core.datetime_utils import to_local_naive
from interview_booking.core.errors import InvalidCursor

SEPARATOR = "::"


@dataclass(frozen=True)
class Cursor:
    slot_start_at: datetime
    slot_id: int


def encode_cursor(slot_start_at: datetime, slot_id: int) -> str:
    raw = f"{slot_start_at.isoformat()}{SEPARATOR}{slot_id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> Cursor:
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidCursor(f"Invalid cursor: {token}") from exc

    parts = raw.split(SEPARATOR)
    if len(parts) != 2:
        raise InvalidCursor(f"Invalid cursor: {token}")
    try:
        slot_start_at = datetime.fromisoformat(parts[0])
        slot_id = int(parts[1])
    except ValueError as exc:
        raise InvalidCursor(f"Invalid cursor: {token}") from exc
    # Slot starts are stored naive in the calendar zone.
    return Cursor(slot_start_at=to_local_naive(slot_start_at, settings.tz), slot_id=slot_id)
