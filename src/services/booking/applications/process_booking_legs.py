from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from aws_lambda_powertools import Logger

from services.booking.domain.entity import Booking, Leg
from services.booking.domain.enum import BookingStatus, LegStatus
from services.booking.domain.event import (
    BookingLegEndedEvent,
    BookingLegEndReminderEvent,
    BookingLegStartedEvent,
    BookingLegStartReminderEvent,
)
from services.booking.domain.repository import BookingRepository
from services.shared.domain import DomainEvent, DomainEventPublisher
from services.shared.domain.exception import DomainException
from services.shared.utils import clock

logger = Logger(child=True)

REMINDER_LEAD_TIME = timedelta(hours=1)

_STARTABLE_BOOKINGS = frozenset({BookingStatus.CONFIRMED, BookingStatus.ACTIVE})
_STARTABLE_LEGS = frozenset({LegStatus.PENDING, LegStatus.CONFIRMED})


@dataclass
class LegProcessingResult:
    """1回のバッチ実行の集計"""

    started: int = 0
    ended: int = 0
    start_reminders: int = 0
    end_reminders: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return {
            "started": self.started,
            "ended": self.ended,
            "start_reminders": self.start_reminders,
            "end_reminders": self.end_reminders,
            "failed": self.failed,
        }


class ProcessBookingLegsService:
    """毎分実行: 現在の1分間に開始・終了するレッグを遷移させ、1時間前通知を発行する"""

    def __init__(
        self, repository: BookingRepository, event_publisher: DomainEventPublisher
    ) -> None:
        self._repository = repository
        self._event_publisher = event_publisher

    def process(self, now: datetime | None = None) -> LegProcessingResult:
        current = clock.to_business_time(now) if now else clock.now()
        result = LegProcessingResult()
        window = clock.minute_window(current)
        reminder_window = clock.minute_window(current + REMINDER_LEAD_TIME)

        self._start_legs(current, window, result)
        self._end_legs(current, window, result)
        self._send_start_reminders(current, reminder_window, result)
        self._send_end_reminders(current, reminder_window, result)

        logger.info("Processed booking legs", extra=result.to_dict())
        return result

    def _start_legs(
        self,
        now: datetime,
        window: tuple[datetime, datetime],
        result: LegProcessingResult,
    ) -> None:
        for booking in self._repository.find_by_leg_start_window(*window):
            if booking.status not in _STARTABLE_BOOKINGS:
                continue
            for leg in booking.legs:
                if leg.status not in _STARTABLE_LEGS or not leg.starts_within(*window):
                    continue
                if self._apply(booking, leg, lambda b, lg: b.activate_leg(lg.id, now)):
                    self._event_publisher.publish(
                        [
                            BookingLegStartedEvent(
                                leg_start_time=leg.leg_start_time,
                                **self._leg_event_fields(booking, leg, now),
                            )
                        ]
                    )
                    result.started += 1
                else:
                    result.failed += 1
                    break

    def _end_legs(
        self,
        now: datetime,
        window: tuple[datetime, datetime],
        result: LegProcessingResult,
    ) -> None:
        for booking in self._repository.find_by_leg_end_window(*window):
            if booking.status != BookingStatus.ACTIVE:
                continue
            for leg in booking.legs:
                if leg.status != LegStatus.ACTIVE or not leg.ends_within(*window):
                    continue
                if self._apply(booking, leg, lambda b, lg: b.complete_leg(lg.id, now)):
                    self._event_publisher.publish(
                        [
                            BookingLegEndedEvent(
                                leg_end_time=leg.leg_end_time,
                                **self._leg_event_fields(booking, leg, now),
                            )
                        ]
                    )
                    result.ended += 1
                else:
                    result.failed += 1
                    break

    def _send_start_reminders(
        self,
        now: datetime,
        window: tuple[datetime, datetime],
        result: LegProcessingResult,
    ) -> None:
        events: list[DomainEvent] = []
        for booking in self._repository.find_by_leg_start_window(*window):
            if booking.status not in _STARTABLE_BOOKINGS:
                continue
            for leg in booking.legs:
                if leg.status in _STARTABLE_LEGS and leg.starts_within(*window):
                    events.append(
                        BookingLegStartReminderEvent(
                            leg_start_time=leg.leg_start_time,
                            **self._leg_event_fields(booking, leg, now),
                        )
                    )
        if events:
            self._event_publisher.publish(events)
        result.start_reminders += len(events)

    def _send_end_reminders(
        self,
        now: datetime,
        window: tuple[datetime, datetime],
        result: LegProcessingResult,
    ) -> None:
        events: list[DomainEvent] = []
        for booking in self._repository.find_by_leg_end_window(*window):
            if booking.status != BookingStatus.ACTIVE:
                continue
            for leg in booking.legs:
                if leg.status == LegStatus.ACTIVE and leg.ends_within(*window):
                    events.append(
                        BookingLegEndReminderEvent(
                            leg_end_time=leg.leg_end_time,
                            **self._leg_event_fields(booking, leg, now),
                        )
                    )
        if events:
            self._event_publisher.publish(events)
        result.end_reminders += len(events)

    def _apply(
        self,
        booking: Booking,
        leg: Leg,
        transition: Callable[[Booking, Leg], object],
    ) -> bool:
        """遷移と保存を行う。ドメイン例外はログに残して False を返す

        False の場合、メモリ上の予約は保存されていない状態を含むため、
        呼び出し側はその予約の残りのレッグを処理しない。
        """
        expected_status = booking.status
        try:
            transition(booking, leg)
            self._repository.update(booking, expected_status=expected_status)
        except DomainException as e:
            logger.exception(
                "Failed to process booking leg",
                extra={
                    "booking_id": booking.id,
                    "leg_id": leg.id,
                    "error_code": e.code,
                },
            )
            return False
        return True

    @staticmethod
    def _leg_event_fields(booking: Booking, leg: Leg, now: datetime) -> dict:
        return {
            "occurred_at": now,
            "booking_id": booking.id,
            "booking_reference": booking.booking_reference,
            "leg_id": leg.id,
            "customer_id": booking.customer_id,
            "chauffeur_id": booking.chauffeur_id,
        }
