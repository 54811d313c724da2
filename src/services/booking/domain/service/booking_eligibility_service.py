from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from services.booking.domain.entity import Booking
from services.booking.domain.enum import BookingStatus
from services.booking.domain.value_object import BookingPeriod

_BLOCKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.ACTIVE})


@dataclass(frozen=True)
class EligibilityResult:
    """資格判定の結果"""

    is_eligible: bool
    reason: str | None = None

    @classmethod
    def eligible(cls) -> "EligibilityResult":
        return cls(is_eligible=True)

    @classmethod
    def ineligible(cls, reason: str) -> "EligibilityResult":
        return cls(is_eligible=False, reason=reason)

    def __bool__(self) -> bool:
        return self.is_eligible


class BookingEligibilityService:
    """予約のライフサイクル操作の可否を判定する"""

    def can_activate(self, booking: Booking, now: datetime) -> EligibilityResult:
        if booking.is_eligible_for_activation(now):
            return EligibilityResult.eligible()
        if booking.status != BookingStatus.CONFIRMED:
            return EligibilityResult.ineligible(
                f"Booking must be CONFIRMED to activate (current: {booking.status.value})"
            )
        if booking.chauffeur_id is None:
            return EligibilityResult.ineligible("No chauffeur assigned")
        return EligibilityResult.ineligible("Booking start time has not been reached")

    def can_confirm(self, booking: Booking) -> EligibilityResult:
        """支払い確定は PENDING の予約のみ"""
        if booking.status == BookingStatus.PENDING:
            return EligibilityResult.eligible()
        return EligibilityResult.ineligible(
            f"Only PENDING bookings can be confirmed (current: {booking.status.value})"
        )

    def can_complete(self, booking: Booking, now: datetime) -> EligibilityResult:
        if booking.is_eligible_for_completion(now):
            return EligibilityResult.eligible()
        if booking.status != BookingStatus.ACTIVE:
            return EligibilityResult.ineligible(
                f"Booking must be ACTIVE to complete (current: {booking.status.value})"
            )
        return EligibilityResult.ineligible("Booking end time has not been reached")

    def can_cancel(self, booking: Booking, now: datetime) -> EligibilityResult:
        if booking.is_eligible_for_cancellation(now):
            return EligibilityResult.eligible()
        if booking.status != BookingStatus.CONFIRMED:
            return EligibilityResult.ineligible(
                f"Only CONFIRMED bookings can be cancelled (current: {booking.status.value})"
            )
        return EligibilityResult.ineligible(
            "Bookings can only be cancelled at least 12 hours before start time"
        )

    def needs_start_reminder(self, booking: Booking, now: datetime) -> EligibilityResult:
        if booking.is_eligible_for_start_reminder(now):
            return EligibilityResult.eligible()
        return EligibilityResult.ineligible("Not within the start reminder window")

    def needs_end_reminder(self, booking: Booking, now: datetime) -> EligibilityResult:
        if booking.is_eligible_for_end_reminder(now):
            return EligibilityResult.eligible()
        return EligibilityResult.ineligible("Not within the end reminder window")

    def can_book_car_for_period(
        self, existing_bookings: Iterable[Booking], period: BookingPeriod
    ) -> EligibilityResult:
        """確定済み・進行中の予約と期間が重ならないか"""
        for existing in existing_bookings:
            if existing.status not in _BLOCKING_STATUSES:
                continue
            if existing.booking_period.overlaps(period):
                return EligibilityResult.ineligible(
                    f"Car is already booked for an overlapping period "
                    f"({existing.booking_reference})"
                )
        return EligibilityResult.eligible()
