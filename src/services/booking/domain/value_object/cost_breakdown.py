from dataclasses import dataclass
from decimal import Decimal

from .booking_financials import BookingFinancials


@dataclass(frozen=True)
class CostBreakdown:
    """料金計算の結果"""

    leg_prices: tuple[Decimal, ...]
    net_total: Decimal
    security_detail_cost: Decimal
    net_total_with_security: Decimal
    platform_service_fee_amount: Decimal
    subtotal_before_vat: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    fleet_owner_commission_amount: Decimal
    fleet_owner_payout_amount_net: Decimal

    @property
    def leg_count(self) -> int:
        return len(self.leg_prices)

    @property
    def items_net_value_per_leg(self) -> Decimal:
        return self.net_total / self.leg_count

    @property
    def fleet_owner_earning_per_leg(self) -> Decimal:
        return self.fleet_owner_payout_amount_net / self.leg_count

    def to_financials(self) -> BookingFinancials:
        return BookingFinancials(
            total_amount=self.total_amount,
            net_total=self.net_total,
            security_detail_cost=self.security_detail_cost,
            platform_service_fee_amount=self.platform_service_fee_amount,
            vat_amount=self.vat_amount,
            fleet_owner_payout_amount_net=self.fleet_owner_payout_amount_net,
        )
