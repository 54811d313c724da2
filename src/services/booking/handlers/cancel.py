from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEvent,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from services.booking.applications.booking_lifecycle import BookingLifecycleService
from services.booking.handlers import dependencies
from services.booking.handlers.error_response import error_response
from services.booking.handlers.request_models import CancelBookingRequest
from services.booking.handlers.response_models import to_response
from services.shared.domain.exception import DomainException
from services.shared.utils import api_error_response, api_response

logger = Logger()

service = BookingLifecycleService(
    repository=dependencies.booking_repository(),
    event_publisher=dependencies.event_publisher(),
)


@logger.inject_lambda_context
@event_source(data_class=APIGatewayProxyEvent)
def lambda_handler(event: APIGatewayProxyEvent, context: LambdaContext) -> dict:
    """予約キャンセル Lambda ハンドラ"""
    booking_id = (event.path_parameters or {}).get("booking_id")
    if not booking_id:
        return api_error_response(400, "VALIDATION_ERROR", "booking_id is required")

    logger.info("Received cancel booking request", extra={"booking_id": booking_id})

    try:
        request = CancelBookingRequest.model_validate_json(event.body or "{}")
        booking = service.cancel(booking_id, request.reason)
    except (ValidationError, DomainException) as e:
        logger.warning("Cancel booking rejected", extra={"error": str(e)})
        return error_response(e)

    return api_response(200, to_response(booking))
