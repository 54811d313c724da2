from pydantic import ValidationError

from services.booking.domain.exception import (
    BookingAmountMismatchError,
    InvalidBookingPeriodError,
)
from services.shared.domain.exception import (
    BusinessRuleViolationException,
    DomainException,
    OptimisticLockException,
    ResourceNotFoundException,
)
from services.shared.utils import api_error_response

_UNPROCESSABLE = (BookingAmountMismatchError, InvalidBookingPeriodError)


def error_response(exc: Exception) -> dict:
    """例外を API Gateway のエラーレスポンスに変換する"""
    if isinstance(exc, ValidationError):
        return api_error_response(
            400,
            "VALIDATION_ERROR",
            "Invalid request",
            {"errors": exc.errors(include_url=False)},
        )
    if isinstance(exc, DomainException):
        return api_error_response(
            _status_code(exc), exc.code, exc.message, exc.context
        )
    if isinstance(exc, ValueError):
        return api_error_response(400, "VALIDATION_ERROR", str(exc))
    return api_error_response(500, "INTERNAL_ERROR", "Internal server error")


def _status_code(exc: DomainException) -> int:
    if isinstance(exc, ResourceNotFoundException):
        return 404
    if isinstance(exc, _UNPROCESSABLE):
        return 422
    if isinstance(exc, (BusinessRuleViolationException, OptimisticLockException)):
        return 409
    return 500
