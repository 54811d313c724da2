from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from services.booking.domain.enum import AddonType
from services.booking.domain.value_object import PlatformFeeRates, RateSchedule


class CarRateRepository(ABC):
    """車両料金表の参照インターフェース"""

    @abstractmethod
    def find_rates(self, car_id: str) -> RateSchedule | None:
        raise NotImplementedError


class PlatformFeeRepository(ABC):
    """プラットフォーム手数料率の参照インターフェース"""

    @abstractmethod
    def get_current_rates(self) -> PlatformFeeRates | None:
        raise NotImplementedError


class AddonRateRepository(ABC):
    """オプション料金の参照インターフェース"""

    @abstractmethod
    def find_current_rate(
        self, addon_type: AddonType, effective_date: datetime
    ) -> Decimal | None:
        """effective_date 時点で有効な料金（1レッグ・1シフトあたり）"""
        raise NotImplementedError
