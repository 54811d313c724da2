from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from services.shared.domain import DomainEvent


@dataclass(frozen=True)
class BookingEvent(DomainEvent):
    """予約集約が発行するイベントの基底クラス"""

    booking_id: str
    booking_reference: str


@dataclass(frozen=True)
class BookingCreatedEvent(BookingEvent):
    customer_id: str
    car_id: str
    booking_type: str
    start_date_time: datetime
    end_date_time: datetime
    total_amount: Decimal


@dataclass(frozen=True)
class BookingConfirmedEvent(BookingEvent):
    customer_id: str
    payment_id: str
    total_amount: Decimal


@dataclass(frozen=True)
class BookingCancelledEvent(BookingEvent):
    customer_id: str
    reason: str


@dataclass(frozen=True)
class BookingChauffeurAssignedEvent(BookingEvent):
    chauffeur_id: str
    fleet_owner_id: str
    assigned_by: str


@dataclass(frozen=True)
class BookingChauffeurUnassignedEvent(BookingEvent):
    chauffeur_id: str
    fleet_owner_id: str
    unassigned_by: str
    reason: str


@dataclass(frozen=True)
class BookingLegEvent(BookingEvent):
    leg_id: str
    customer_id: str
    chauffeur_id: str | None


@dataclass(frozen=True)
class BookingLegStartedEvent(BookingLegEvent):
    leg_start_time: datetime


@dataclass(frozen=True)
class BookingLegEndedEvent(BookingLegEvent):
    leg_end_time: datetime


@dataclass(frozen=True)
class BookingLegStartReminderEvent(BookingLegEvent):
    leg_start_time: datetime


@dataclass(frozen=True)
class BookingLegEndReminderEvent(BookingLegEvent):
    leg_end_time: datetime
