from functools import cache

from services.booking.domain.service import BookingCostCalculator
from services.booking.infrastructure.dynamodb_booking_repository import (
    DynamoDBBookingRepository,
)
from services.booking.infrastructure.dynamodb_rate_repositories import (
    DynamoDBAddonRateRepository,
    DynamoDBCarRateRepository,
    DynamoDBPlatformFeeRepository,
)
from services.booking.infrastructure.eventbridge_event_publisher import (
    EventBridgeDomainEventPublisher,
)


@cache
def booking_repository() -> DynamoDBBookingRepository:
    return DynamoDBBookingRepository()


@cache
def car_rate_repository() -> DynamoDBCarRateRepository:
    return DynamoDBCarRateRepository()


@cache
def cost_calculator() -> BookingCostCalculator:
    return BookingCostCalculator(
        platform_fee_repository=DynamoDBPlatformFeeRepository(),
        addon_rate_repository=DynamoDBAddonRateRepository(),
    )


@cache
def event_publisher() -> EventBridgeDomainEventPublisher:
    return EventBridgeDomainEventPublisher()
