import secrets
import time
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TypedDict

from services.booking.domain.entity.leg import Leg, LegProps
from services.booking.domain.enum import BookingStatus, LegStatus, PaymentStatus
from services.booking.domain.event import (
    BookingCancelledEvent,
    BookingChauffeurAssignedEvent,
    BookingChauffeurUnassignedEvent,
    BookingConfirmedEvent,
    BookingCreatedEvent,
)
from services.booking.domain.exception import (
    BookingNotPersistedError,
    ChauffeurAssignmentError,
    InvalidBookingStatusTransitionError,
    LegNotFoundError,
)
from services.booking.domain.value_object import BookingFinancials, BookingPeriod
from services.shared.domain import AggregateRoot
from services.shared.utils import clock

DEFAULT_CANCELLATION_REASON = "Booking cancelled by customer"
REASSIGNMENT_REASON = "Reassigned to different chauffeur"
DEFAULT_UNASSIGN_REASON = "Chauffeur unassigned"

REMINDER_LEAD_TIME = timedelta(hours=1)
CANCELLATION_CUTOFF = timedelta(hours=12)

_CHAUFFEUR_ASSIGNMENT_BLOCKED = frozenset(
    {
        BookingStatus.PENDING,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.REJECTED,
    }
)
_CHAUFFEUR_UNASSIGNMENT_BLOCKED = frozenset(
    {BookingStatus.ACTIVE, BookingStatus.COMPLETED}
)
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class BookingProps(TypedDict):
    """予約の永続化表現（TypedDict）"""

    id: str
    booking_reference: str
    customer_id: str
    car_id: str
    booking_period: BookingPeriod
    pickup_address: str
    dropoff_address: str
    financials: BookingFinancials
    status: BookingStatus
    payment_status: PaymentStatus
    payment_intent: str | None
    payment_id: str | None
    chauffeur_id: str | None
    special_requests: str | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    legs: list[LegProps]
    created_at: datetime
    updated_at: datetime
    version: int


class Booking(AggregateRoot[str | None]):
    """予約集約"""

    def __init__(
        self,
        id: str | None,
        booking_reference: str,
        customer_id: str,
        car_id: str,
        booking_period: BookingPeriod,
        pickup_address: str,
        dropoff_address: str,
        financials: BookingFinancials,
        status: BookingStatus = BookingStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.UNPAID,
        payment_intent: str | None = None,
        payment_id: str | None = None,
        chauffeur_id: str | None = None,
        special_requests: str | None = None,
        cancelled_at: datetime | None = None,
        cancellation_reason: str | None = None,
        legs: Sequence[Leg] = (),
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        version: int = 0,
    ) -> None:
        super().__init__(id)
        self._booking_reference = booking_reference
        self._customer_id = customer_id
        self._car_id = car_id
        self._booking_period = booking_period
        self._pickup_address = pickup_address
        self._dropoff_address = dropoff_address
        self._financials = financials
        self._status = status
        self._payment_status = payment_status
        self._payment_intent = payment_intent
        self._payment_id = payment_id
        self._chauffeur_id = chauffeur_id
        self._special_requests = special_requests
        self._cancelled_at = cancelled_at
        self._cancellation_reason = cancellation_reason
        self._legs: list[Leg] = list(legs)
        self._created_at = created_at or clock.now()
        self._updated_at = updated_at or self._created_at
        self._version = version

    @classmethod
    def create(
        cls,
        customer_id: str,
        car_id: str,
        booking_period: BookingPeriod,
        pickup_address: str,
        dropoff_address: str,
        financials: BookingFinancials,
        special_requests: str | None = None,
        payment_intent: str | None = None,
    ) -> "Booking":
        """新規予約を生成する（ID は永続化時に採番）"""
        return cls(
            id=None,
            booking_reference=generate_booking_reference(),
            customer_id=customer_id,
            car_id=car_id,
            booking_period=booking_period,
            pickup_address=pickup_address,
            dropoff_address=dropoff_address,
            financials=financials,
            special_requests=special_requests,
            payment_intent=payment_intent,
        )

    @classmethod
    def reconstitute(cls, props: BookingProps) -> "Booking":
        """永続化済みの予約を復元する"""
        return cls(
            id=props["id"],
            booking_reference=props["booking_reference"],
            customer_id=props["customer_id"],
            car_id=props["car_id"],
            booking_period=props["booking_period"],
            pickup_address=props["pickup_address"],
            dropoff_address=props["dropoff_address"],
            financials=props["financials"],
            status=BookingStatus(props["status"]),
            payment_status=PaymentStatus(props["payment_status"]),
            payment_intent=props.get("payment_intent"),
            payment_id=props.get("payment_id"),
            chauffeur_id=props.get("chauffeur_id"),
            special_requests=props.get("special_requests"),
            cancelled_at=props.get("cancelled_at"),
            cancellation_reason=props.get("cancellation_reason"),
            legs=[Leg.reconstitute(leg) for leg in props["legs"]],
            created_at=props["created_at"],
            updated_at=props["updated_at"],
            version=props.get("version", 0),
        )

    @property
    def booking_reference(self) -> str:
        return self._booking_reference

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def car_id(self) -> str:
        return self._car_id

    @property
    def booking_period(self) -> BookingPeriod:
        return self._booking_period

    @property
    def pickup_address(self) -> str:
        return self._pickup_address

    @property
    def dropoff_address(self) -> str:
        return self._dropoff_address

    @property
    def financials(self) -> BookingFinancials:
        return self._financials

    @property
    def status(self) -> BookingStatus:
        return self._status

    @property
    def payment_status(self) -> PaymentStatus:
        return self._payment_status

    @property
    def payment_intent(self) -> str | None:
        return self._payment_intent

    @property
    def payment_id(self) -> str | None:
        return self._payment_id

    @property
    def chauffeur_id(self) -> str | None:
        return self._chauffeur_id

    @property
    def special_requests(self) -> str | None:
        return self._special_requests

    @property
    def cancelled_at(self) -> datetime | None:
        return self._cancelled_at

    @property
    def cancellation_reason(self) -> str | None:
        return self._cancellation_reason

    @property
    def legs(self) -> tuple[Leg, ...]:
        return tuple(self._legs)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        """永続化済みのバージョン（楽観ロックの条件に使う）"""
        return self._version

    def add_leg(self, leg: Leg) -> None:
        if self._id is not None:
            leg.attach_to_booking(self._id)
        self._legs.append(leg)

    def find_leg(self, leg_id: str) -> Leg:
        for leg in self._legs:
            if leg.id == leg_id:
                return leg
        raise LegNotFoundError(self._id, leg_id)

    def mark_persisted(self, booking_id: str) -> None:
        """リポジトリが採番した ID を割り当てる"""
        if self._id is not None and self._id != booking_id:
            raise ValueError(
                f"Booking already persisted with id {self._id}, got {booking_id}"
            )
        self._id = booking_id
        for leg in self._legs:
            leg.attach_to_booking(booking_id)

    def mark_saved(self) -> None:
        """書き込み成功後にリポジトリが呼ぶ"""
        self._version += 1

    def mark_as_created(self) -> None:
        """作成イベントを記録する（永続化後に呼ぶ）"""
        self._require_persisted("recording creation")
        self.add_domain_event(
            BookingCreatedEvent(
                occurred_at=clock.now(),
                booking_id=self._id,
                booking_reference=self._booking_reference,
                customer_id=self._customer_id,
                car_id=self._car_id,
                booking_type=self._booking_period.booking_type.value,
                start_date_time=self._booking_period.start_date_time,
                end_date_time=self._booking_period.end_date_time,
                total_amount=self._financials.total_amount,
            )
        )

    def confirm_with_payment(self, payment_id: str) -> None:
        """支払い完了により予約を確定する"""
        self._require_persisted("confirming payment")
        self._transition_to(BookingStatus.CONFIRMED)
        self._payment_id = payment_id
        self._payment_status = PaymentStatus.PAID
        for leg in self._legs:
            if leg.status == LegStatus.PENDING:
                leg.confirm()
        self.add_domain_event(
            BookingConfirmedEvent(
                occurred_at=clock.now(),
                booking_id=self._id,
                booking_reference=self._booking_reference,
                customer_id=self._customer_id,
                payment_id=payment_id,
                total_amount=self._financials.total_amount,
            )
        )

    def reject(self, reason: str | None = None) -> None:
        self._transition_to(BookingStatus.REJECTED)
        self._cancellation_reason = reason

    def activate(self) -> None:
        self._transition_to(BookingStatus.ACTIVE)

    def complete(self) -> None:
        self._transition_to(BookingStatus.COMPLETED)

    def cancel(self, reason: str | None = None) -> None:
        """予約をキャンセルし、未開始のレッグもキャンセルする"""
        self._require_persisted("cancelling")
        self._transition_to(BookingStatus.CANCELLED)
        self._payment_status = PaymentStatus.REFUNDED
        self._cancelled_at = clock.now()
        self._cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
        for leg in self._legs:
            if leg.status in (LegStatus.PENDING, LegStatus.CONFIRMED):
                leg.cancel()
        self.add_domain_event(
            BookingCancelledEvent(
                occurred_at=self._cancelled_at,
                booking_id=self._id,
                booking_reference=self._booking_reference,
                customer_id=self._customer_id,
                reason=self._cancellation_reason,
            )
        )

    def activate_leg(self, leg_id: str, now: datetime | None = None) -> Leg:
        """レッグを開始し、初日であれば予約も ACTIVE にする"""
        leg = self.find_leg(leg_id)
        leg.activate()
        today = clock.to_business_time(now or clock.now()).date()
        if self._status == BookingStatus.CONFIRMED and self._booking_period.starts_on(
            today
        ):
            self.activate()
        self._touch()
        return leg

    def complete_leg(self, leg_id: str, now: datetime | None = None) -> Leg:
        """レッグを終了し、最終日であれば予約も COMPLETED にする"""
        leg = self.find_leg(leg_id)
        leg.complete()
        today = clock.to_business_time(now or clock.now()).date()
        if self._status == BookingStatus.ACTIVE and self._booking_period.ends_on(today):
            self.complete()
        self._touch()
        return leg

    def assign_chauffeur(
        self, chauffeur_id: str, fleet_owner_id: str, assigned_by: str
    ) -> None:
        """運転手を割り当てる（別の運転手からの付け替えも含む）"""
        self._require_persisted("assigning a chauffeur")
        if not chauffeur_id:
            raise ChauffeurAssignmentError(
                "Chauffeur id is required", booking_id=self._id
            )
        if self._status in _CHAUFFEUR_ASSIGNMENT_BLOCKED:
            raise ChauffeurAssignmentError(
                f"Cannot assign chauffeur to booking in {self._status.value} status",
                booking_id=self._id,
                status=self._status.value,
            )
        if self._chauffeur_id == chauffeur_id:
            return

        previous = self._chauffeur_id
        self._chauffeur_id = chauffeur_id
        self._touch()
        now = clock.now()
        self.add_domain_event(
            BookingChauffeurAssignedEvent(
                occurred_at=now,
                booking_id=self._id,
                booking_reference=self._booking_reference,
                chauffeur_id=chauffeur_id,
                fleet_owner_id=fleet_owner_id,
                assigned_by=assigned_by,
            )
        )
        if previous is not None:
            self.add_domain_event(
                BookingChauffeurUnassignedEvent(
                    occurred_at=now,
                    booking_id=self._id,
                    booking_reference=self._booking_reference,
                    chauffeur_id=previous,
                    fleet_owner_id=fleet_owner_id,
                    unassigned_by=assigned_by,
                    reason=REASSIGNMENT_REASON,
                )
            )

    def unassign_chauffeur(
        self, fleet_owner_id: str, unassigned_by: str, reason: str | None = None
    ) -> None:
        self._require_persisted("unassigning a chauffeur")
        if self._chauffeur_id is None:
            raise ChauffeurAssignmentError(
                "No chauffeur is assigned to this booking", booking_id=self._id
            )
        if self._status in _CHAUFFEUR_UNASSIGNMENT_BLOCKED:
            raise ChauffeurAssignmentError(
                f"Cannot unassign chauffeur from booking in {self._status.value} status",
                booking_id=self._id,
                status=self._status.value,
            )

        previous = self._chauffeur_id
        self._chauffeur_id = None
        self._touch()
        self.add_domain_event(
            BookingChauffeurUnassignedEvent(
                occurred_at=clock.now(),
                booking_id=self._id,
                booking_reference=self._booking_reference,
                chauffeur_id=previous,
                fleet_owner_id=fleet_owner_id,
                unassigned_by=unassigned_by,
                reason=reason or DEFAULT_UNASSIGN_REASON,
            )
        )

    def is_eligible_for_activation(self, now: datetime) -> bool:
        return (
            self._status == BookingStatus.CONFIRMED
            and self._booking_period.start_date_time <= now
            and self._chauffeur_id is not None
        )

    def is_eligible_for_completion(self, now: datetime) -> bool:
        return (
            self._status == BookingStatus.ACTIVE
            and self._booking_period.end_date_time <= now
        )

    def is_eligible_for_start_reminder(self, now: datetime) -> bool:
        start = self._booking_period.start_date_time
        return (
            self._status == BookingStatus.CONFIRMED
            and start - REMINDER_LEAD_TIME <= now < start
        )

    def is_eligible_for_end_reminder(self, now: datetime) -> bool:
        end = self._booking_period.end_date_time
        return (
            self._status == BookingStatus.ACTIVE
            and end - REMINDER_LEAD_TIME <= now < end
        )

    def is_eligible_for_cancellation(self, now: datetime) -> bool:
        """開始12時間前までの CONFIRMED 予約のみキャンセル可能"""
        return (
            self._status == BookingStatus.CONFIRMED
            and now <= self._booking_period.start_date_time - CANCELLATION_CUTOFF
        )

    def to_props(self) -> BookingProps:
        if self._id is None:
            raise BookingNotPersistedError("exporting props")
        return BookingProps(
            id=self._id,
            booking_reference=self._booking_reference,
            customer_id=self._customer_id,
            car_id=self._car_id,
            booking_period=self._booking_period,
            pickup_address=self._pickup_address,
            dropoff_address=self._dropoff_address,
            financials=self._financials,
            status=self._status,
            payment_status=self._payment_status,
            payment_intent=self._payment_intent,
            payment_id=self._payment_id,
            chauffeur_id=self._chauffeur_id,
            special_requests=self._special_requests,
            cancelled_at=self._cancelled_at,
            cancellation_reason=self._cancellation_reason,
            legs=[leg.to_props() for leg in self._legs],
            created_at=self._created_at,
            updated_at=self._updated_at,
            version=self._version,
        )

    def _transition_to(self, target: BookingStatus) -> None:
        if not self._status.can_transition_to(target):
            raise InvalidBookingStatusTransitionError(
                self._id, self._status.value, target.value
            )
        self._status = target
        self._touch()

    def _require_persisted(self, operation: str) -> None:
        if self._id is None:
            raise BookingNotPersistedError(operation)

    def _touch(self) -> None:
        self._updated_at = clock.now()


def generate_booking_reference() -> str:
    """BK-<ミリ秒タイムスタンプの36進数>-<ランダム8桁> 形式の予約番号"""
    millis = time.time_ns() // 1_000_000
    encoded = ""
    while millis:
        millis, remainder = divmod(millis, 36)
        encoded = _BASE36_DIGITS[remainder] + encoded
    return f"BK-{encoded or '0'}-{secrets.token_hex(4)}".upper()
