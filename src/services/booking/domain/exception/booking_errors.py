from decimal import Decimal

from services.shared.domain.exception import (
    BusinessRuleViolationException,
    DomainException,
    ResourceNotFoundException,
)


class InvalidBookingStatusTransitionError(BusinessRuleViolationException):
    """予約ステータスの不正な遷移"""

    code = "INVALID_BOOKING_STATUS_TRANSITION"

    def __init__(self, booking_id: str | None, current: str, target: str) -> None:
        super().__init__(
            f"Cannot transition booking {booking_id} from {current} to {target}",
            booking_id=booking_id,
            current_status=current,
            target_status=target,
        )


class InvalidLegStatusTransitionError(BusinessRuleViolationException):
    """レッグステータスの不正な遷移"""

    code = "INVALID_LEG_STATUS_TRANSITION"

    def __init__(self, leg_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Cannot transition leg {leg_id} from {current} to {target}",
            leg_id=leg_id,
            current_status=current,
            target_status=target,
        )


class BookingIneligibleError(BusinessRuleViolationException):
    """資格判定に通らなかった操作"""

    code = "BOOKING_INELIGIBLE"
    action = "process"

    def __init__(self, booking_id: str | None, reason: str) -> None:
        super().__init__(
            f"Booking {booking_id} cannot be {self.action}: {reason}",
            booking_id=booking_id,
            reason=reason,
        )
        self.reason = reason


class BookingCannotBeActivatedError(BookingIneligibleError):
    code = "BOOKING_CANNOT_BE_ACTIVATED"
    action = "activated"


class BookingCannotBeCompletedError(BookingIneligibleError):
    code = "BOOKING_CANNOT_BE_COMPLETED"
    action = "completed"


class BookingCannotBeCancelledError(BookingIneligibleError):
    code = "BOOKING_CANNOT_BE_CANCELLED"
    action = "cancelled"


class BookingCannotBeConfirmedError(BookingIneligibleError):
    code = "BOOKING_CANNOT_BE_CONFIRMED"
    action = "confirmed"


class BookingNotFoundError(ResourceNotFoundException):
    code = "BOOKING_NOT_FOUND"

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking not found: {booking_id}", booking_id=booking_id)


class LegNotFoundError(ResourceNotFoundException):
    code = "LEG_NOT_FOUND"

    def __init__(self, booking_id: str | None, leg_id: str) -> None:
        super().__init__(
            f"Leg {leg_id} not found in booking {booking_id}",
            booking_id=booking_id,
            leg_id=leg_id,
        )


class BookingNotPersistedError(DomainException):
    """永続化前（ID 未採番）の予約でイベントを発生させようとした"""

    code = "BOOKING_NOT_PERSISTED"

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Booking must be persisted before {operation}", operation=operation
        )


class BookingAmountMismatchError(BusinessRuleViolationException):
    """クライアント提示金額とサーバ計算金額の不一致"""

    code = "BOOKING_AMOUNT_MISMATCH"

    def __init__(self, client_amount: Decimal, server_amount: Decimal) -> None:
        super().__init__(
            f"Amount verification failed. Client sent {client_amount}, "
            f"but server calculated {server_amount}. "
            "Please refresh the page and try again.",
            client_amount=str(client_amount),
            server_amount=str(server_amount),
        )
        self.client_amount = client_amount
        self.server_amount = server_amount


class ChauffeurAssignmentError(BusinessRuleViolationException):
    code = "CHAUFFEUR_ASSIGNMENT_FAILED"


class CarUnavailableError(BusinessRuleViolationException):
    """指定期間に車両が他の予約で埋まっている"""

    code = "CAR_UNAVAILABLE"


class PaymentVerificationFailedError(BusinessRuleViolationException):
    code = "PAYMENT_VERIFICATION_FAILED"
