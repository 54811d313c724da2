from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEvent,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from services.booking.applications.create_booking import (
    BookingRequest,
    CreateBookingService,
)
from services.booking.handlers import dependencies
from services.booking.handlers.error_response import error_response
from services.booking.handlers.request_models import CreateBookingRequest
from services.booking.handlers.response_models import to_response
from services.shared.domain.exception import DomainException
from services.shared.utils import api_response

logger = Logger()

service = CreateBookingService(
    repository=dependencies.booking_repository(),
    car_rate_repository=dependencies.car_rate_repository(),
    cost_calculator=dependencies.cost_calculator(),
    event_publisher=dependencies.event_publisher(),
)


@logger.inject_lambda_context
@event_source(data_class=APIGatewayProxyEvent)
def lambda_handler(event: APIGatewayProxyEvent, context: LambdaContext) -> dict:
    """予約作成 Lambda ハンドラ"""
    logger.info("Received create booking request")

    try:
        request = CreateBookingRequest.model_validate_json(event.body or "{}")
        booking_request: BookingRequest = {
            "customer_id": request.customer_id,
            "car_id": request.car_id,
            "booking_type": request.booking_type,
            "start_date": request.start_date,
            "end_date": request.end_date,
            "pickup_time": request.pickup_time,
            "pickup_address": request.pickup_address,
            "dropoff_address": request.dropoff_address,
            "include_security_detail": request.include_security_detail,
            "special_requests": request.special_requests,
            "client_total_amount": request.total_amount,
        }
        booking = service.create(booking_request)
    except (ValidationError, DomainException) as e:
        logger.warning("Create booking rejected", extra={"error": str(e)})
        return error_response(e)

    return api_response(201, to_response(booking))
