from collections.abc import Sequence
from datetime import datetime, time, timedelta

from services.booking.domain.enum import BookingType, LegPosition
from services.booking.domain.value_object import BookingPeriod
from services.shared.utils import clock

FULL_DAY_UNIT = timedelta(hours=24)
_MIDNIGHT_EPSILON = timedelta(milliseconds=1)


class LegSegmenter:
    """予約期間を料金計算単位のレッグ日付に分割する"""

    def segment(self, period: BookingPeriod) -> list[datetime]:
        """レッグ日付を昇順で返す（有効な期間なら空にならない）"""
        if period.booking_type == BookingType.NIGHT:
            return self._segment_nights(period)
        if period.booking_type == BookingType.FULL_DAY:
            return self._segment_full_days(period)
        return self._segment_days(period)

    def positions(self, leg_dates: Sequence[datetime]) -> list[LegPosition]:
        count = len(leg_dates)
        if count == 1:
            return [LegPosition.ONLY]
        return [
            LegPosition.FIRST
            if i == 0
            else LegPosition.LAST
            if i == count - 1
            else LegPosition.MIDDLE
            for i in range(count)
        ]

    def _segment_nights(self, period: BookingPeriod) -> list[datetime]:
        # 夜をまたぐ回数 = 開始日と終了日の暦日差
        first_night = period.start_date
        nights = max(1, (period.end_date - first_night).days)
        return [
            clock.at_local(first_night + timedelta(days=i), time(0, 0))
            for i in range(nights)
        ]

    def _segment_full_days(self, period: BookingPeriod) -> list[datetime]:
        whole, remainder = divmod(period.duration, FULL_DAY_UNIT)
        count = whole + (1 if remainder else 0)
        return [period.start_date_time + FULL_DAY_UNIT * i for i in range(count)]

    def _segment_days(self, period: BookingPeriod) -> list[datetime]:
        end = period.end_date_time
        if end == clock.start_of_day(end):
            end -= _MIDNIGHT_EPSILON

        first_day = period.start_date
        last_day = end.date()
        return [
            clock.at_local(first_day + timedelta(days=i), time(0, 0))
            for i in range((last_day - first_day).days + 1)
        ]
