import os
from datetime import datetime
from decimal import Decimal

import boto3
from boto3.dynamodb.conditions import Key

from services.booking.domain.enum import AddonType
from services.booking.domain.repository import (
    AddonRateRepository,
    CarRateRepository,
    PlatformFeeRepository,
)
from services.booking.domain.value_object import PlatformFeeRates, RateSchedule


class _DynamoDBTableMixin:
    def _init_table(self, table_name: str | None) -> None:
        self.table_name = table_name or os.getenv("TABLE_NAME")
        self.dynamodb = boto3.resource("dynamodb")
        self.table = self.dynamodb.Table(self.table_name)


class DynamoDBCarRateRepository(_DynamoDBTableMixin, CarRateRepository):
    """車両料金表（PK=CAR#<id>, SK=RATES）"""

    def __init__(self, table_name: str | None = None) -> None:
        self._init_table(table_name)

    def find_rates(self, car_id: str) -> RateSchedule | None:
        response = self.table.get_item(Key={"PK": f"CAR#{car_id}", "SK": "RATES"})
        item = response.get("Item")
        if not item:
            return None
        return RateSchedule(
            day_rate=item["day_rate"],
            night_rate=item["night_rate"],
            hourly_rate=item["hourly_rate"],
            full_day_rate=item["full_day_rate"],
        )


class DynamoDBPlatformFeeRepository(_DynamoDBTableMixin, PlatformFeeRepository):
    """現在有効なプラットフォーム手数料率（PK=CONFIG, SK=PLATFORM_FEE#CURRENT）"""

    def __init__(self, table_name: str | None = None) -> None:
        self._init_table(table_name)

    def get_current_rates(self) -> PlatformFeeRates | None:
        response = self.table.get_item(
            Key={"PK": "CONFIG", "SK": "PLATFORM_FEE#CURRENT"}
        )
        item = response.get("Item")
        if not item:
            return None
        return PlatformFeeRates(
            platform_service_fee_rate=item["platform_service_fee_rate"],
            fleet_owner_commission_rate=item["fleet_owner_commission_rate"],
            vat_rate=item["vat_rate"],
        )


class DynamoDBAddonRateRepository(_DynamoDBTableMixin, AddonRateRepository):
    """オプション料金の履歴（PK=ADDON_RATE#<type>, SK=EFFECTIVE#<iso>）"""

    def __init__(self, table_name: str | None = None) -> None:
        self._init_table(table_name)

    def find_current_rate(
        self, addon_type: AddonType, effective_date: datetime
    ) -> Decimal | None:
        response = self.table.query(
            KeyConditionExpression=Key("PK").eq(f"ADDON_RATE#{addon_type.value}")
            & Key("SK").lte(f"EFFECTIVE#{effective_date.isoformat()}"),
            ScanIndexForward=False,
            Limit=1,
        )
        items = response.get("Items", [])
        if not items:
            return None
        return Decimal(str(items[0]["rate"]))
