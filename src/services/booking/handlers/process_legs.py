from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.typing import LambdaContext

from services.booking.applications.process_booking_legs import (
    ProcessBookingLegsService,
)
from services.booking.handlers import dependencies

logger = Logger()

service = ProcessBookingLegsService(
    repository=dependencies.booking_repository(),
    event_publisher=dependencies.event_publisher(),
)


@logger.inject_lambda_context
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """レッグ状態更新 Lambda ハンドラ（EventBridge で毎分起動）"""
    logger.info("Processing booking legs", extra={"trigger_time": event.get("time")})
    result = service.process()
    return result.to_dict()
