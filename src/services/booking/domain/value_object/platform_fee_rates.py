from dataclasses import dataclass, fields
from decimal import Decimal

from services.booking.domain.exception import MissingRateDataError
from services.shared.utils.validators import to_decimal


@dataclass(frozen=True)
class PlatformFeeRates:
    """プラットフォーム手数料率（パーセント表記: 10 = 10%）"""

    platform_service_fee_rate: Decimal
    fleet_owner_commission_rate: Decimal
    vat_rate: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            raw = getattr(self, f.name)
            try:
                value = to_decimal(raw)
            except ValueError as e:
                raise MissingRateDataError(
                    f"Invalid {f.name}: {raw!r}", rate=f.name
                ) from e
            if not value.is_finite() or value < 0:
                raise MissingRateDataError(
                    f"Invalid {f.name}: must be a finite, non-negative percentage",
                    rate=f.name,
                    value=str(value),
                )
            object.__setattr__(self, f.name, value)
