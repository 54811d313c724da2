from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from aws_lambda_powertools import Logger

from services.booking.domain.entity import Booking
from services.booking.domain.exception import BookingNotFoundError
from services.booking.domain.repository import BookingRepository
from services.booking.domain.service import BookingDomainService
from services.shared.domain import DomainEventPublisher
from services.shared.domain.exception import DomainException
from services.shared.utils import clock

logger = Logger(child=True)


@dataclass
class StatusUpdateResult:
    activated: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class BookingLifecycleService:
    """予約のキャンセル・開始・完了のユースケース"""

    def __init__(
        self,
        repository: BookingRepository,
        event_publisher: DomainEventPublisher,
        domain_service: BookingDomainService | None = None,
    ) -> None:
        self._repository = repository
        self._event_publisher = event_publisher
        self._domain_service = domain_service or BookingDomainService()

    def cancel(
        self, booking_id: str, reason: str | None = None, now: datetime | None = None
    ) -> Booking:
        booking = self._get(booking_id)
        expected_status = booking.status
        self._domain_service.cancel_booking(booking, reason, now)
        self._repository.update(booking, expected_status=expected_status)
        self._event_publisher.publish(booking.flush_domain_events())
        logger.info(
            "Booking cancelled",
            extra={"booking_id": booking_id, "reason": booking.cancellation_reason},
        )
        return booking

    def activate(self, booking_id: str, now: datetime | None = None) -> Booking:
        booking = self._get(booking_id)
        expected_status = booking.status
        self._domain_service.activate_booking(booking, now)
        self._repository.update(booking, expected_status=expected_status)
        return booking

    def complete(self, booking_id: str, now: datetime | None = None) -> Booking:
        booking = self._get(booking_id)
        expected_status = booking.status
        self._domain_service.complete_booking(booking, now)
        self._repository.update(booking, expected_status=expected_status)
        return booking

    def process_status_updates(
        self, bookings: Iterable[Booking], now: datetime | None = None
    ) -> StatusUpdateResult:
        """開始・完了の条件を満たした予約をまとめて遷移させる"""
        current = now or clock.now()
        result = StatusUpdateResult()
        for booking in bookings:
            try:
                expected_status = booking.status
                if booking.is_eligible_for_activation(current):
                    self._domain_service.activate_booking(booking, current)
                    processed = result.activated
                elif booking.is_eligible_for_completion(current):
                    self._domain_service.complete_booking(booking, current)
                    processed = result.completed
                else:
                    continue
                self._repository.update(booking, expected_status=expected_status)
                processed.append(booking.id)
            except DomainException:
                logger.exception(
                    "Failed to update booking status", extra={"booking_id": booking.id}
                )
                result.failed.append(booking.id)
        return result

    def _get(self, booking_id: str) -> Booking:
        booking = self._repository.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking
