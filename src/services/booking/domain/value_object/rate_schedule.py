from dataclasses import dataclass, fields
from decimal import Decimal

from services.shared.utils.validators import to_decimal


@dataclass(frozen=True)
class RateSchedule:
    """車両ごとの料金表"""

    day_rate: Decimal
    night_rate: Decimal
    hourly_rate: Decimal
    full_day_rate: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            value = to_decimal(getattr(self, f.name))
            if not value.is_finite():
                raise ValueError(f"Invalid {f.name}: must be finite")
            object.__setattr__(self, f.name, value)
