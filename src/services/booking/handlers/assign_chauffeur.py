from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEvent,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from services.booking.applications.chauffeur_assignment import (
    ChauffeurAssignmentService,
)
from services.booking.handlers import dependencies
from services.booking.handlers.error_response import error_response
from services.booking.handlers.request_models import AssignChauffeurRequest
from services.booking.handlers.response_models import to_response
from services.shared.domain.exception import DomainException
from services.shared.utils import api_error_response, api_response

logger = Logger()

service = ChauffeurAssignmentService(
    repository=dependencies.booking_repository(),
    event_publisher=dependencies.event_publisher(),
)


@logger.inject_lambda_context
@event_source(data_class=APIGatewayProxyEvent)
def lambda_handler(event: APIGatewayProxyEvent, context: LambdaContext) -> dict:
    """運転手割り当て Lambda ハンドラ"""
    booking_id = (event.path_parameters or {}).get("booking_id")
    if not booking_id:
        return api_error_response(400, "VALIDATION_ERROR", "booking_id is required")

    try:
        request = AssignChauffeurRequest.model_validate_json(event.body or "{}")
        logger.info(
            "Assigning chauffeur",
            extra={"booking_id": booking_id, "chauffeur_id": request.chauffeur_id},
        )
        booking = service.assign(
            booking_id,
            chauffeur_id=request.chauffeur_id,
            fleet_owner_id=request.fleet_owner_id,
            assigned_by=request.assigned_by,
        )
    except (ValidationError, DomainException) as e:
        logger.warning("Chauffeur assignment rejected", extra={"error": str(e)})
        return error_response(e)

    return api_response(200, to_response(booking))
