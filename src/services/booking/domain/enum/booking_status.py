from enum import Enum


class BookingStatus(str, Enum):
    """予約ステータス"""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"

    def can_transition_to(self, target: "BookingStatus") -> bool:
        """target への遷移が許可されているか"""
        return target in _BOOKING_TRANSITIONS[self]

    def is_terminal(self) -> bool:
        return not _BOOKING_TRANSITIONS[self]


_BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.REJECTED}
    ),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.ACTIVE, BookingStatus.CANCELLED}
    ),
    BookingStatus.ACTIVE: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}
