from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from aws_lambda_powertools import Logger

from services.booking.domain.enum import AddonType
from services.booking.domain.exception import MissingRateDataError
from services.booking.domain.repository import (
    AddonRateRepository,
    PlatformFeeRepository,
)
from services.booking.domain.service.leg_pricer import LegPricer
from services.booking.domain.service.leg_segmenter import LegSegmenter
from services.booking.domain.value_object import (
    BookingPeriod,
    CostBreakdown,
    RateSchedule,
)

logger = Logger(child=True)

_HUNDRED = Decimal("100")


class BookingCostCalculator:
    """レッグ料金・警備オプション・手数料・VAT から予約金額を計算する"""

    def __init__(
        self,
        platform_fee_repository: PlatformFeeRepository,
        addon_rate_repository: AddonRateRepository,
        pricer: LegPricer | None = None,
        segmenter: LegSegmenter | None = None,
    ) -> None:
        self._platform_fee_repository = platform_fee_repository
        self._addon_rate_repository = addon_rate_repository
        self._pricer = pricer or LegPricer()
        self._segmenter = segmenter or LegSegmenter()

    def calculate(
        self,
        rates: RateSchedule,
        leg_dates: Sequence[datetime],
        period: BookingPeriod,
        include_security_detail: bool = False,
    ) -> CostBreakdown:
        if not leg_dates:
            raise ValueError("At least one leg is required to calculate cost")

        fee_rates = self._platform_fee_repository.get_current_rates()
        if fee_rates is None:
            raise MissingRateDataError("Platform fee rates are not configured")

        leg_prices = tuple(
            self._pricer.price(rates, period.booking_type, position)
            for position in self._segmenter.positions(leg_dates)
        )
        net_total = sum(leg_prices, Decimal("0"))

        security_detail_cost = Decimal("0")
        if include_security_detail:
            security_detail_cost = self._security_detail_cost(len(leg_dates), period)

        net_total_with_security = net_total + security_detail_cost
        platform_service_fee_amount = (
            net_total_with_security * fee_rates.platform_service_fee_rate / _HUNDRED
        )
        subtotal_before_vat = net_total_with_security + platform_service_fee_amount
        vat_amount = subtotal_before_vat * fee_rates.vat_rate / _HUNDRED
        total_amount = subtotal_before_vat + vat_amount

        # 車両オーナーの手数料は警備オプションを含まない純額に対して計算する
        fleet_owner_commission_amount = (
            net_total * fee_rates.fleet_owner_commission_rate / _HUNDRED
        )
        fleet_owner_payout_amount_net = net_total - fleet_owner_commission_amount

        return CostBreakdown(
            leg_prices=leg_prices,
            net_total=net_total,
            security_detail_cost=security_detail_cost,
            net_total_with_security=net_total_with_security,
            platform_service_fee_amount=platform_service_fee_amount,
            subtotal_before_vat=subtotal_before_vat,
            vat_amount=vat_amount,
            total_amount=total_amount,
            fleet_owner_commission_amount=fleet_owner_commission_amount,
            fleet_owner_payout_amount_net=fleet_owner_payout_amount_net,
        )

    def _security_detail_cost(self, leg_count: int, period: BookingPeriod) -> Decimal:
        rate = self._addon_rate_repository.find_current_rate(
            AddonType.SECURITY_DETAIL, period.start_date_time
        )
        if rate is None:
            logger.warning(
                "Security detail rate not found, skipping addon cost",
                extra={"effective_date": period.start_date_time.isoformat()},
            )
            return Decimal("0")
        return rate * leg_count * period.security_detail_multiplier
