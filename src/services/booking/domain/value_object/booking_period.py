from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from services.booking.domain.enum import BookingType
from services.booking.domain.exception import InvalidBookingPeriodError
from services.shared.utils.clock import to_business_time

_SECURITY_DETAIL_MULTIPLIERS: dict[BookingType, int] = {
    BookingType.DAY: 1,
    BookingType.NIGHT: 1,
    BookingType.FULL_DAY: 2,
}


@dataclass(frozen=True)
class BookingPeriod:
    """予約期間（開始日時 + 終了日時 + 予約種別）

    日時は業務タイムゾーンに正規化して保持する。
    """

    start_date_time: datetime
    end_date_time: datetime
    booking_type: BookingType

    def __post_init__(self) -> None:
        try:
            booking_type = BookingType(self.booking_type)
        except ValueError as e:
            raise InvalidBookingPeriodError(
                f"Invalid booking type: {self.booking_type}",
                booking_type=str(self.booking_type),
            ) from e

        start = to_business_time(self.start_date_time)
        end = to_business_time(self.end_date_time)
        if end <= start:
            raise InvalidBookingPeriodError(
                "End date must be after start date",
                start_date_time=start.isoformat(),
                end_date_time=end.isoformat(),
            )

        object.__setattr__(self, "booking_type", booking_type)
        object.__setattr__(self, "start_date_time", start)
        object.__setattr__(self, "end_date_time", end)

    @property
    def duration(self) -> timedelta:
        return self.end_date_time - self.start_date_time

    @property
    def start_date(self) -> date:
        return self.start_date_time.date()

    @property
    def end_date(self) -> date:
        return self.end_date_time.date()

    @property
    def start_time(self) -> time:
        return self.start_date_time.timetz().replace(tzinfo=None)

    @property
    def end_time(self) -> time:
        return self.end_date_time.timetz().replace(tzinfo=None)

    @property
    def security_detail_multiplier(self) -> int:
        """警備オプションの料金倍率（FULL_DAY は 24 時間で 2 シフト）"""
        return _SECURITY_DETAIL_MULTIPLIERS[self.booking_type]

    def overlaps(self, other: "BookingPeriod") -> bool:
        """半開区間 [start, end) 同士で重なりがあるか"""
        return (
            self.start_date_time < other.end_date_time
            and other.start_date_time < self.end_date_time
        )

    def starts_on(self, day: date) -> bool:
        return self.start_date == day

    def ends_on(self, day: date) -> bool:
        return self.end_date == day

    def is_upcoming(self, now: datetime) -> bool:
        return now < self.start_date_time

    def is_in_progress(self, now: datetime) -> bool:
        return self.start_date_time <= now < self.end_date_time

    def is_past(self, now: datetime) -> bool:
        return self.end_date_time <= now
