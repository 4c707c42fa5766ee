SLOT_STATUS_AVAILABLE = "AVAILABLE"
SLOT_STATUS_BOOKED = "BOOKED"
SLOT_STATUS_CANCELLED = "CANCELLED"

SLOT_STATUS_VALUES = (
    SLOT_STATUS_AVAILABLE,
    SLOT_STATUS_BOOKED,
    SLOT_STATUS_CANCELLED,
)
