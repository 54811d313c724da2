from dataclasses import dataclass, fields
from decimal import Decimal

from services.booking.domain.exception import (
    InvalidFinancialAmountError,
    NegativeFinancialAmountError,
    NonPositiveFinancialAmountError,
)
from services.shared.utils.validators import to_decimal

_POSITIVE_FIELDS = frozenset({"total_amount", "net_total"})


@dataclass(frozen=True)
class BookingFinancials:
    """予約の金額内訳（作成時に一度だけ確定する）"""

    total_amount: Decimal
    net_total: Decimal
    security_detail_cost: Decimal
    platform_service_fee_amount: Decimal
    vat_amount: Decimal
    fleet_owner_payout_amount_net: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            raw = getattr(self, f.name)
            try:
                value = to_decimal(raw)
            except ValueError as e:
                raise InvalidFinancialAmountError(
                    f"Invalid {f.name}: must be finite", field=f.name
                ) from e

            if not value.is_finite():
                raise InvalidFinancialAmountError(
                    f"Invalid {f.name}: must be finite", field=f.name
                )
            if f.name in _POSITIVE_FIELDS and value <= 0:
                raise NonPositiveFinancialAmountError(
                    f"{f.name} must be positive", field=f.name, value=str(value)
                )
            if value < 0:
                raise NegativeFinancialAmountError(
                    f"{f.name} cannot be negative", field=f.name, value=str(value)
                )
            object.__setattr__(self, f.name, value)
