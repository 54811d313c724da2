from aws_lambda_powertools import Logger

from services.booking.domain.entity import Booking
from services.booking.domain.enum import BookingStatus, PaymentStatus
from services.booking.domain.exception import (
    BookingCannotBeConfirmedError,
    BookingNotFoundError,
    PaymentVerificationFailedError,
)
from services.booking.domain.repository import BookingRepository
from services.booking.domain.service import (
    BookingEligibilityService,
    PaymentVerificationService,
)
from services.shared.domain import DomainEventPublisher

logger = Logger(child=True)


class ConfirmBookingPaymentService:
    """支払い完了通知から予約を確定するユースケース"""

    def __init__(
        self,
        repository: BookingRepository,
        payment_verification: PaymentVerificationService,
        event_publisher: DomainEventPublisher,
        eligibility: BookingEligibilityService | None = None,
    ) -> None:
        self._repository = repository
        self._payment_verification = payment_verification
        self._event_publisher = event_publisher
        self._eligibility = eligibility or BookingEligibilityService()

    def confirm(self, booking_id: str, transaction_id: str) -> Booking:
        booking = self._repository.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)

        # Webhook の再送は確定済みとしてそのまま返す
        if (
            booking.status == BookingStatus.CONFIRMED
            and booking.payment_status == PaymentStatus.PAID
        ):
            logger.info(
                "Booking already confirmed, skipping",
                extra={"booking_id": booking_id, "transaction_id": transaction_id},
            )
            return booking

        eligibility = self._eligibility.can_confirm(booking)
        if not eligibility.is_eligible:
            raise BookingCannotBeConfirmedError(booking_id, eligibility.reason or "")

        result = self._payment_verification.verify_payment(
            transaction_id, booking.financials.total_amount
        )
        if not result.success:
            raise PaymentVerificationFailedError(
                result.error_message or "Payment verification failed",
                booking_id=booking_id,
                transaction_id=transaction_id,
            )

        expected_status = booking.status
        booking.confirm_with_payment(result.transaction_id)
        self._repository.update(booking, expected_status=expected_status)
        self._event_publisher.publish(booking.flush_domain_events())
        return booking
