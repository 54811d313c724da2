import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TypedDict

from services.booking.domain.enum import LegStatus
from services.booking.domain.exception import (
    InvalidLegStatusTransitionError,
    NegativeFinancialAmountError,
)
from services.shared.domain import Entity
from services.shared.domain.exception import BusinessRuleViolationException
from services.shared.utils.validators import to_decimal

REMINDER_LEAD_TIME = timedelta(hours=1)


class LegProps(TypedDict):
    """レッグの永続化表現（TypedDict）"""

    id: str
    booking_id: str | None
    leg_date: date
    leg_start_time: datetime
    leg_end_time: datetime
    total_daily_price: Decimal
    items_net_value_for_leg: Decimal
    fleet_owner_earning_for_leg: Decimal
    status: LegStatus
    notes: str | None


class Leg(Entity[str]):
    """予約レッグ（予約期間を1日単位に分割した区間）"""

    def __init__(
        self,
        id: str,
        booking_id: str | None,
        leg_date: date,
        leg_start_time: datetime,
        leg_end_time: datetime,
        total_daily_price: Decimal,
        items_net_value_for_leg: Decimal,
        fleet_owner_earning_for_leg: Decimal,
        status: LegStatus = LegStatus.PENDING,
        notes: str | None = None,
    ) -> None:
        super().__init__(id)
        self._booking_id = booking_id
        self._leg_date = leg_date
        self._leg_start_time = leg_start_time
        self._leg_end_time = leg_end_time
        self._total_daily_price = total_daily_price
        self._items_net_value_for_leg = items_net_value_for_leg
        self._fleet_owner_earning_for_leg = fleet_owner_earning_for_leg
        self._status = status
        self._notes = notes

    @classmethod
    def create(
        cls,
        leg_date: date,
        leg_start_time: datetime,
        leg_end_time: datetime,
        total_daily_price: Decimal,
        items_net_value_for_leg: Decimal,
        fleet_owner_earning_for_leg: Decimal,
        booking_id: str | None = None,
        notes: str | None = None,
    ) -> "Leg":
        """新規レッグを生成する"""
        if leg_start_time >= leg_end_time:
            raise BusinessRuleViolationException(
                "Leg start time must be before end time",
                leg_start_time=leg_start_time.isoformat(),
                leg_end_time=leg_end_time.isoformat(),
            )

        amounts = {
            "total_daily_price": to_decimal(total_daily_price),
            "items_net_value_for_leg": to_decimal(items_net_value_for_leg),
            "fleet_owner_earning_for_leg": to_decimal(fleet_owner_earning_for_leg),
        }
        for name, amount in amounts.items():
            if amount < 0:
                raise NegativeFinancialAmountError(
                    f"{name} cannot be negative", field=name, value=str(amount)
                )

        return cls(
            id=str(uuid.uuid4()),
            booking_id=booking_id,
            leg_date=leg_date,
            leg_start_time=leg_start_time,
            leg_end_time=leg_end_time,
            status=LegStatus.PENDING,
            notes=notes,
            **amounts,
        )

    @classmethod
    def reconstitute(cls, props: LegProps) -> "Leg":
        """永続化済みのレッグを復元する"""
        if not props.get("id") or not props.get("booking_id"):
            raise ValueError("Persisted leg requires both id and booking_id")
        return cls(
            id=props["id"],
            booking_id=props["booking_id"],
            leg_date=props["leg_date"],
            leg_start_time=props["leg_start_time"],
            leg_end_time=props["leg_end_time"],
            total_daily_price=props["total_daily_price"],
            items_net_value_for_leg=props["items_net_value_for_leg"],
            fleet_owner_earning_for_leg=props["fleet_owner_earning_for_leg"],
            status=LegStatus(props["status"]),
            notes=props.get("notes"),
        )

    @property
    def booking_id(self) -> str | None:
        return self._booking_id

    @property
    def leg_date(self) -> date:
        return self._leg_date

    @property
    def leg_start_time(self) -> datetime:
        return self._leg_start_time

    @property
    def leg_end_time(self) -> datetime:
        return self._leg_end_time

    @property
    def total_daily_price(self) -> Decimal:
        return self._total_daily_price

    @property
    def items_net_value_for_leg(self) -> Decimal:
        return self._items_net_value_for_leg

    @property
    def fleet_owner_earning_for_leg(self) -> Decimal:
        return self._fleet_owner_earning_for_leg

    @property
    def status(self) -> LegStatus:
        return self._status

    @property
    def notes(self) -> str | None:
        return self._notes

    @property
    def duration(self) -> timedelta:
        return self._leg_end_time - self._leg_start_time

    def attach_to_booking(self, booking_id: str) -> None:
        """永続化時に採番された予約IDを紐付ける"""
        if self._booking_id is None:
            self._booking_id = booking_id

    def confirm(self) -> None:
        self._transition_to(LegStatus.CONFIRMED)

    def activate(self) -> None:
        self._transition_to(LegStatus.ACTIVE)

    def complete(self) -> None:
        self._transition_to(LegStatus.COMPLETED)

    def cancel(self) -> None:
        self._transition_to(LegStatus.CANCELLED)

    def is_upcoming(self, now: datetime) -> bool:
        return now < self._leg_start_time

    def is_in_progress(self, now: datetime) -> bool:
        return self._leg_start_time <= now < self._leg_end_time

    def has_ended(self, now: datetime) -> bool:
        return self._leg_end_time <= now

    def is_eligible_for_start_reminder(self, now: datetime) -> bool:
        """開始1時間前から開始時刻までの間か"""
        return self._leg_start_time - REMINDER_LEAD_TIME <= now < self._leg_start_time

    def is_eligible_for_end_reminder(self, now: datetime) -> bool:
        """終了1時間前から終了時刻までの間か"""
        return self._leg_end_time - REMINDER_LEAD_TIME <= now < self._leg_end_time

    def starts_within(self, window_start: datetime, window_end: datetime) -> bool:
        return window_start <= self._leg_start_time < window_end

    def ends_within(self, window_start: datetime, window_end: datetime) -> bool:
        return window_start <= self._leg_end_time < window_end

    def to_props(self) -> LegProps:
        return LegProps(
            id=self._id,
            booking_id=self._booking_id,
            leg_date=self._leg_date,
            leg_start_time=self._leg_start_time,
            leg_end_time=self._leg_end_time,
            total_daily_price=self._total_daily_price,
            items_net_value_for_leg=self._items_net_value_for_leg,
            fleet_owner_earning_for_leg=self._fleet_owner_earning_for_leg,
            status=self._status,
            notes=self._notes,
        )

    def _transition_to(self, target: LegStatus) -> None:
        if not self._status.can_transition_to(target):
            raise InvalidLegStatusTransitionError(
                self._id, self._status.value, target.value
            )
        self._status = target
