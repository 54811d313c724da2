from decimal import Decimal

from services.booking.domain.enum import BookingType, LegPosition
from services.booking.domain.value_object import RateSchedule

_ZERO = Decimal("0")


class LegPricer:
    """レッグ単位の料金を決める"""

    def price(
        self,
        rates: RateSchedule,
        booking_type: BookingType,
        position: LegPosition = LegPosition.ONLY,
    ) -> Decimal:
        """予約種別に応じた定額料金を返す

        position はレッグの位置を表すが、現行の料金体系では価格に影響しない。
        """
        del position  # 定額制のため未使用
        if booking_type == BookingType.NIGHT:
            rate = rates.night_rate
        elif booking_type == BookingType.FULL_DAY:
            rate = rates.full_day_rate
        else:
            rate = rates.day_rate
        return max(_ZERO, rate)
