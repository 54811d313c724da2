from enum import Enum


class BookingType(str, Enum):
    """予約種別"""

    DAY = "DAY"
    NIGHT = "NIGHT"
    FULL_DAY = "FULL_DAY"
