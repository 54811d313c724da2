from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import NotRequired, TypedDict

from services.booking.domain.entity import Booking, Leg
from services.booking.domain.exception import (
    BookingCannotBeActivatedError,
    BookingCannotBeCancelledError,
    BookingCannotBeCompletedError,
)
from services.booking.domain.service.booking_eligibility_service import (
    BookingEligibilityService,
)
from services.booking.domain.value_object import BookingPeriod, CostBreakdown
from services.shared.domain.exception import BusinessRuleViolationException
from services.shared.utils import clock


class CreateBookingCommand(TypedDict):
    """予約作成の入力データ構造（TypedDict）"""

    customer_id: str
    car_id: str
    booking_period: BookingPeriod
    pickup_address: str
    dropoff_address: str
    leg_dates: Sequence[datetime]
    precalculated_costs: CostBreakdown
    special_requests: NotRequired[str | None]
    payment_intent: NotRequired[str | None]


class BookingDomainService:
    """予約集約をまたぐ組み立て・資格判定付き操作"""

    def __init__(self, eligibility: BookingEligibilityService | None = None) -> None:
        self._eligibility = eligibility or BookingEligibilityService()

    def create_booking(self, command: CreateBookingCommand) -> Booking:
        """計算済みの料金から予約とレッグを組み立てる"""
        costs = command["precalculated_costs"]
        leg_dates = list(command["leg_dates"])
        period = command["booking_period"]
        if len(leg_dates) != costs.leg_count:
            raise ValueError(
                f"Leg count mismatch: {len(leg_dates)} dates, "
                f"{costs.leg_count} priced legs"
            )

        booking = Booking.create(
            customer_id=command["customer_id"],
            car_id=command["car_id"],
            booking_period=period,
            pickup_address=command["pickup_address"],
            dropoff_address=command["dropoff_address"],
            financials=costs.to_financials(),
            special_requests=command.get("special_requests"),
            payment_intent=command.get("payment_intent"),
        )

        items_net_value = costs.items_net_value_per_leg
        owner_earning = costs.fleet_owner_earning_per_leg
        for leg_date, price in zip(leg_dates, costs.leg_prices):
            start, end = self._leg_times(leg_date, period)
            booking.add_leg(
                Leg.create(
                    leg_date=clock.to_business_time(leg_date).date(),
                    leg_start_time=start,
                    leg_end_time=end,
                    total_daily_price=price,
                    items_net_value_for_leg=items_net_value,
                    fleet_owner_earning_for_leg=owner_earning,
                )
            )
        return booking

    def cancel_booking(
        self, booking: Booking, reason: str | None = None, now: datetime | None = None
    ) -> None:
        result = self._eligibility.can_cancel(booking, now or clock.now())
        if not result.is_eligible:
            raise BookingCannotBeCancelledError(booking.id, result.reason or "")
        booking.cancel(reason)

    def activate_booking(self, booking: Booking, now: datetime | None = None) -> None:
        result = self._eligibility.can_activate(booking, now or clock.now())
        if not result.is_eligible:
            raise BookingCannotBeActivatedError(booking.id, result.reason or "")
        booking.activate()

    def complete_booking(self, booking: Booking, now: datetime | None = None) -> None:
        result = self._eligibility.can_complete(booking, now or clock.now())
        if not result.is_eligible:
            raise BookingCannotBeCompletedError(booking.id, result.reason or "")
        booking.complete()

    @staticmethod
    def _leg_times(
        leg_date: datetime, period: BookingPeriod
    ) -> tuple[datetime, datetime]:
        """レッグ日付に予約期間の開始・終了時刻を当てはめる"""
        leg_day = clock.to_business_time(leg_date).date()
        start = clock.at_local(leg_day, period.start_time)
        end = clock.at_local(leg_day, period.end_time)
        if end <= start:
            end += timedelta(days=1)

        if start < period.start_date_time or end > period.end_date_time:
            raise BusinessRuleViolationException(
                "Leg falls outside the booking period",
                leg_start_time=start.isoformat(),
                leg_end_time=end.isoformat(),
            )
        return start, end
