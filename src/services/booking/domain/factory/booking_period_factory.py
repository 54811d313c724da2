from datetime import date, datetime, time, timedelta

from services.booking.domain.enum import BookingType
from services.booking.domain.exception import (
    InvalidBookingPeriodError,
    PastBookingTimeError,
    SameDayBookingRestrictionError,
)
from services.booking.domain.value_object import BookingPeriod, PickupTime
from services.shared.utils import clock

DAY_PICKUP_EARLIEST_HOUR = 7
DAY_PICKUP_LATEST_HOUR = 11
DAY_SESSION = timedelta(hours=12)

NIGHT_START = time(23, 0)
NIGHT_END = time(5, 0)

FULL_DAY_EARLIEST_START_HOUR = 7
FULL_DAY_LATEST_START_HOUR = 22
FULL_DAY_UNIT = timedelta(hours=24)

SAME_DAY_CUTOFF_HOUR = 12


class BookingPeriodFactory:
    """予約種別ごとのルールで BookingPeriod を生成するファクトリ"""

    def create(
        self,
        booking_type: BookingType | str,
        start_date: date,
        end_date: date | None = None,
        pickup_time: PickupTime | str | None = None,
        now: datetime | None = None,
    ) -> BookingPeriod:
        """リクエストを検証して BookingPeriod を生成する

        - DAY: pickup_time 必須。各日 pickup_time から 12 時間
        - NIGHT: 23:00 から翌 05:00 まで（pickup_time は無視）
        - FULL_DAY: start_date / end_date に日時を指定。24 時間単位
        """
        current = clock.to_business_time(now) if now else clock.now()
        try:
            booking_type = BookingType(booking_type)
        except ValueError as e:
            raise InvalidBookingPeriodError(
                f"Invalid booking type: {booking_type}",
                booking_type=str(booking_type),
            ) from e

        if booking_type == BookingType.DAY:
            period = self._create_day(start_date, end_date, pickup_time)
        elif booking_type == BookingType.NIGHT:
            period = self._create_night(start_date, end_date)
        else:
            period = self._create_full_day(start_date, end_date)

        self._validate_not_in_past(period, current)
        if booking_type != BookingType.NIGHT:
            self._validate_same_day_cutoff(period, current)
        return period

    def reconstitute(
        self, booking_type: BookingType | str, start: datetime, end: datetime
    ) -> BookingPeriod:
        """永続化済みの期間を復元する（種別ごとのルールは再検証しない）"""
        return BookingPeriod(
            start_date_time=start, end_date_time=end, booking_type=BookingType(booking_type)
        )

    def _create_day(
        self,
        start_date: date,
        end_date: date | None,
        pickup_time: PickupTime | str | None,
    ) -> BookingPeriod:
        if pickup_time is None:
            raise InvalidBookingPeriodError("Pickup time is required for DAY bookings")
        try:
            pickup = (
                pickup_time
                if isinstance(pickup_time, PickupTime)
                else PickupTime(pickup_time)
            )
        except ValueError as e:
            raise InvalidBookingPeriodError(str(e), pickup_time=str(pickup_time)) from e

        hour, minute = pickup.to_24_hour()
        if not DAY_PICKUP_EARLIEST_HOUR <= hour <= DAY_PICKUP_LATEST_HOUR:
            raise InvalidBookingPeriodError(
                "DAY bookings must start between 7:00 AM and 11:59 AM",
                pickup_time=str(pickup),
            )

        first_day = _as_local_date(start_date)
        last_day = _as_local_date(end_date) if end_date is not None else first_day
        if last_day < first_day:
            raise InvalidBookingPeriodError(
                "End date cannot be before start date",
                start_date=first_day.isoformat(),
                end_date=last_day.isoformat(),
            )

        pickup_at = time(hour, minute)
        return BookingPeriod(
            start_date_time=clock.at_local(first_day, pickup_at),
            end_date_time=clock.at_local(last_day, pickup_at) + DAY_SESSION,
            booking_type=BookingType.DAY,
        )

    def _create_night(self, start_date: date, end_date: date | None) -> BookingPeriod:
        first_night = _as_local_date(start_date)
        last_morning = (
            _as_local_date(end_date)
            if end_date is not None
            else first_night + timedelta(days=1)
        )
        if last_morning <= first_night:
            raise InvalidBookingPeriodError(
                "NIGHT bookings must end on a later date than they start",
                start_date=first_night.isoformat(),
                end_date=last_morning.isoformat(),
            )
        return BookingPeriod(
            start_date_time=clock.at_local(first_night, NIGHT_START),
            end_date_time=clock.at_local(last_morning, NIGHT_END),
            booking_type=BookingType.NIGHT,
        )

    def _create_full_day(
        self, start_date: date, end_date: date | None
    ) -> BookingPeriod:
        if not isinstance(start_date, datetime) or not isinstance(end_date, datetime):
            raise InvalidBookingPeriodError(
                "FULL_DAY bookings require explicit start and end date-times"
            )
        start = clock.to_business_time(start_date)
        end = clock.to_business_time(end_date)

        if not FULL_DAY_EARLIEST_START_HOUR <= start.hour <= FULL_DAY_LATEST_START_HOUR:
            raise InvalidBookingPeriodError(
                "FULL_DAY bookings must start between 7:00 AM and 10:59 PM",
                start_date_time=start.isoformat(),
            )

        duration = end - start
        if duration < FULL_DAY_UNIT:
            raise InvalidBookingPeriodError(
                "FULL_DAY bookings must last at least 24 hours",
                duration_hours=duration.total_seconds() / 3600,
            )
        if duration % FULL_DAY_UNIT:
            raise InvalidBookingPeriodError(
                "FULL_DAY bookings must be in 24-hour increments",
                duration_hours=duration.total_seconds() / 3600,
            )

        return BookingPeriod(
            start_date_time=start, end_date_time=end, booking_type=BookingType.FULL_DAY
        )

    @staticmethod
    def _validate_not_in_past(period: BookingPeriod, now: datetime) -> None:
        if period.start_date_time <= now:
            raise PastBookingTimeError(
                "Booking start time must be in the future",
                start_date_time=period.start_date_time.isoformat(),
                now=now.isoformat(),
            )

    @staticmethod
    def _validate_same_day_cutoff(period: BookingPeriod, now: datetime) -> None:
        if period.starts_on(now.date()) and now.hour >= SAME_DAY_CUTOFF_HOUR:
            raise SameDayBookingRestrictionError(
                "Same-day bookings must be made before 12:00 PM",
                start_date_time=period.start_date_time.isoformat(),
                now=now.isoformat(),
            )


def _as_local_date(value: date) -> date:
    if isinstance(value, datetime):
        return clock.to_business_time(value).date()
    return value
