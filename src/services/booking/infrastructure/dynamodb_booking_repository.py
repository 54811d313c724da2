import os
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from services.booking.domain.entity import Booking, BookingProps, Leg, LegProps
from services.booking.domain.enum import BookingStatus
from services.booking.domain.factory import BookingPeriodFactory
from services.booking.domain.repository import BookingRepository
from services.booking.domain.value_object import BookingFinancials, BookingPeriod
from services.shared.domain.exception.exceptions import (
    DuplicateResourceException,
    OptimisticLockException,
)

# TransactWriteItems の上限（予約本体 1 件 + レッグ）
MAX_TRANSACTION_ITEMS = 100

_FINANCIAL_FIELDS = (
    "total_amount",
    "net_total",
    "security_detail_cost",
    "platform_service_fee_amount",
    "vat_amount",
    "fleet_owner_payout_amount_net",
)
_LEG_AMOUNT_FIELDS = (
    "total_daily_price",
    "items_net_value_for_leg",
    "fleet_owner_earning_for_leg",
)


def minute_bucket(value: datetime) -> str:
    """GSI のパーティションキーに使う UTC の分単位バケット"""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M")


def utc_iso(value: datetime) -> str:
    """ソートキー比較用の UTC ISO-8601 文字列"""
    return value.astimezone(timezone.utc).isoformat()


class DynamoDBBookingRepository(BookingRepository):
    """DynamoDBを使用したBookingRepository の具象実装

    予約本体と各レッグを同一パーティションに保存し、1 つのトランザクションで書き込む。
    予約本体とレッグには予約のバージョンを持たせ、読み込んだバージョンを書き込み条件にする。
    """

    def __init__(self, table_name: str | None = None) -> None:
        self.table_name = table_name or os.getenv("TABLE_NAME")
        self.dynamodb = boto3.resource("dynamodb")
        self.table = self.dynamodb.Table(self.table_name)
        self.client = self.dynamodb.meta.client
        self._period_factory = BookingPeriodFactory()

    def save(self, booking: Booking) -> None:
        """新規予約を保存する（ID を採番して集約に割り当てる）"""
        booking.mark_persisted(booking.id or str(uuid.uuid4()))
        not_exists = Attr("PK").not_exists()
        try:
            self._write(booking, not_exists, not_exists)
        except ClientError as e:
            if _is_condition_failure(e):
                raise DuplicateResourceException(
                    f"Booking already exists: {booking.id}", booking_id=booking.id
                )
            raise

    def update(
        self, booking: Booking, expected_status: BookingStatus | None = None
    ) -> None:
        """予約とレッグを上書きする（読み込み時のバージョン・ステータスを条件にする）"""
        read_version = Attr("version").eq(booking.version)
        booking_condition = read_version
        if expected_status is not None:
            booking_condition = booking_condition & Attr("status").eq(
                expected_status.value
            )

        try:
            self._write(booking, booking_condition, read_version)
        except ClientError as e:
            if _is_condition_failure(e):
                raise OptimisticLockException(
                    f"Booking was modified concurrently: "
                    f"expected status {expected_status}, version {booking.version}, "
                    f"booking_id={booking.id}",
                    booking_id=booking.id,
                    expected_version=booking.version,
                )
            raise

    def find_by_id(self, booking_id: str) -> Booking | None:
        items = self._query_all(
            KeyConditionExpression=Key("PK").eq(f"BOOKING#{booking_id}"),
            ConsistentRead=True,
        )
        if not items:
            return None
        return self._to_entity(items)

    def find_by_leg_start_window(self, start: datetime, end: datetime) -> list[Booking]:
        return self._find_by_leg_window("GSI1", "GSI1PK", "LEG_START", start, end)

    def find_by_leg_end_window(self, start: datetime, end: datetime) -> list[Booking]:
        return self._find_by_leg_window("GSI2", "GSI2PK", "LEG_END", start, end)

    def find_by_car_id(
        self, car_id: str, overlapping: BookingPeriod | None = None
    ) -> list[Booking]:
        key_condition = Key("GSI3PK").eq(f"CAR#{car_id}")
        kwargs: dict = {"IndexName": "GSI3"}
        if overlapping is not None:
            # start < 期間終了 はキー条件、end > 期間開始 はフィルタで絞る
            key_condition = key_condition & Key("GSI3SK").lt(
                f"START#{utc_iso(overlapping.end_date_time)}"
            )
            kwargs["FilterExpression"] = Attr("end_date_time_utc").gt(
                utc_iso(overlapping.start_date_time)
            )
        items = self._query_all(KeyConditionExpression=key_condition, **kwargs)
        return self._load_all(item["booking_id"] for item in items)

    def _write(self, booking: Booking, booking_condition, leg_condition) -> None:
        """予約本体とレッグを 1 トランザクションで書き込み、成功後にバージョンを進める"""
        if len(booking.legs) + 1 > MAX_TRANSACTION_ITEMS:
            raise ValueError(
                f"Booking {booking.id} has {len(booking.legs)} legs; "
                f"at most {MAX_TRANSACTION_ITEMS - 1} can be written atomically"
            )
        next_version = booking.version + 1
        transact_items = [
            self._put(self._to_booking_item(booking, next_version), booking_condition)
        ]
        for index, leg in enumerate(booking.legs):
            transact_items.append(
                self._put(
                    self._to_leg_item(booking, index, leg, next_version),
                    leg_condition,
                )
            )
        self.client.transact_write_items(TransactItems=transact_items)
        booking.mark_saved()

    def _put(self, item: dict, condition) -> dict:
        return {
            "Put": {
                "TableName": self.table_name,
                "Item": item,
                "ConditionExpression": condition,
            }
        }

    def _query_all(self, **kwargs) -> list[dict]:
        """LastEvaluatedKey を辿って全ページを取得する"""
        items: list[dict] = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _find_by_leg_window(
        self, index: str, key: str, prefix: str, start: datetime, end: datetime
    ) -> list[Booking]:
        booking_ids: list[str] = []
        cursor = start.replace(second=0, microsecond=0)
        while cursor < end:
            items = self._query_all(
                IndexName=index,
                KeyConditionExpression=Key(key).eq(f"{prefix}#{minute_bucket(cursor)}"),
            )
            booking_ids.extend(item["booking_id"] for item in items)
            cursor += timedelta(minutes=1)
        return self._load_all(booking_ids)

    def _load_all(self, booking_ids) -> list[Booking]:
        bookings = []
        for booking_id in dict.fromkeys(booking_ids):
            booking = self.find_by_id(booking_id)
            if booking is not None:
                bookings.append(booking)
        return bookings

    def _to_booking_item(self, booking: Booking, version: int) -> dict:
        period = booking.booking_period
        item = {
            "PK": f"BOOKING#{booking.id}",
            "SK": "METADATA",
            "entity_type": "BOOKING",
            "version": version,
            "booking_id": booking.id,
            "booking_reference": booking.booking_reference,
            "customer_id": booking.customer_id,
            "car_id": booking.car_id,
            "booking_type": period.booking_type.value,
            "start_date_time": period.start_date_time.isoformat(),
            "end_date_time": period.end_date_time.isoformat(),
            "end_date_time_utc": utc_iso(period.end_date_time),
            "pickup_address": booking.pickup_address,
            "dropoff_address": booking.dropoff_address,
            "status": booking.status.value,
            "payment_status": booking.payment_status.value,
            "payment_intent": booking.payment_intent,
            "payment_id": booking.payment_id,
            "chauffeur_id": booking.chauffeur_id,
            "special_requests": booking.special_requests,
            "cancelled_at": _iso_or_none(booking.cancelled_at),
            "cancellation_reason": booking.cancellation_reason,
            "created_at": booking.created_at.isoformat(),
            "updated_at": booking.updated_at.isoformat(),
            "GSI3PK": f"CAR#{booking.car_id}",
            "GSI3SK": f"START#{utc_iso(period.start_date_time)}",
        }
        for name in _FINANCIAL_FIELDS:
            item[name] = str(getattr(booking.financials, name))
        return item

    def _to_leg_item(self, booking: Booking, index: int, leg: Leg, version: int) -> dict:
        item = {
            "PK": f"BOOKING#{booking.id}",
            "SK": f"LEG#{index:03d}#{leg.id}",
            "entity_type": "LEG",
            "version": version,
            "leg_id": leg.id,
            "booking_id": booking.id,
            "leg_date": leg.leg_date.isoformat(),
            "leg_start_time": leg.leg_start_time.isoformat(),
            "leg_end_time": leg.leg_end_time.isoformat(),
            "status": leg.status.value,
            "notes": leg.notes,
            "GSI1PK": f"LEG_START#{minute_bucket(leg.leg_start_time)}",
            "GSI1SK": leg.id,
            "GSI2PK": f"LEG_END#{minute_bucket(leg.leg_end_time)}",
            "GSI2SK": leg.id,
        }
        for name in _LEG_AMOUNT_FIELDS:
            item[name] = str(getattr(leg, name))
        return item

    def _to_entity(self, items: list[dict]) -> Booking:
        """同一パーティションのアイテム群を予約集約に変換する"""
        booking_item = next(i for i in items if i["SK"] == "METADATA")
        leg_items = sorted(
            (i for i in items if i["SK"].startswith("LEG#")), key=lambda i: i["SK"]
        )
        props = BookingProps(
            id=booking_item["booking_id"],
            booking_reference=booking_item["booking_reference"],
            customer_id=booking_item["customer_id"],
            car_id=booking_item["car_id"],
            booking_period=self._period_factory.reconstitute(
                booking_item["booking_type"],
                datetime.fromisoformat(booking_item["start_date_time"]),
                datetime.fromisoformat(booking_item["end_date_time"]),
            ),
            pickup_address=booking_item["pickup_address"],
            dropoff_address=booking_item["dropoff_address"],
            financials=BookingFinancials(
                **{name: Decimal(booking_item[name]) for name in _FINANCIAL_FIELDS}
            ),
            status=BookingStatus(booking_item["status"]),
            payment_status=booking_item["payment_status"],
            payment_intent=booking_item.get("payment_intent"),
            payment_id=booking_item.get("payment_id"),
            chauffeur_id=booking_item.get("chauffeur_id"),
            special_requests=booking_item.get("special_requests"),
            cancelled_at=_datetime_or_none(booking_item.get("cancelled_at")),
            cancellation_reason=booking_item.get("cancellation_reason"),
            legs=[self._to_leg_props(i) for i in leg_items],
            created_at=datetime.fromisoformat(booking_item["created_at"]),
            updated_at=datetime.fromisoformat(booking_item["updated_at"]),
            version=int(booking_item.get("version", 0)),
        )
        return Booking.reconstitute(props)

    @staticmethod
    def _to_leg_props(item: dict) -> LegProps:
        return LegProps(
            id=item["leg_id"],
            booking_id=item["booking_id"],
            leg_date=date.fromisoformat(item["leg_date"]),
            leg_start_time=datetime.fromisoformat(item["leg_start_time"]),
            leg_end_time=datetime.fromisoformat(item["leg_end_time"]),
            total_daily_price=Decimal(item["total_daily_price"]),
            items_net_value_for_leg=Decimal(item["items_net_value_for_leg"]),
            fleet_owner_earning_for_leg=Decimal(item["fleet_owner_earning_for_leg"]),
            status=item["status"],
            notes=item.get("notes"),
        )


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _datetime_or_none(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _is_condition_failure(error: ClientError) -> bool:
    """トランザクション内のいずれかの条件式が満たされなかったか"""
    if error.response["Error"]["Code"] != "TransactionCanceledException":
        return False
    return any(
        reason.get("Code") == "ConditionalCheckFailed"
        for reason in error.response.get("CancellationReasons", [])
    )
