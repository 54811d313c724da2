from datetime import date, datetime
from decimal import Decimal
from typing import NotRequired, TypedDict

from aws_lambda_powertools import Logger

from services.booking.domain.entity import Booking
from services.booking.domain.enum import BookingType
from services.booking.domain.exception import CarUnavailableError, MissingRateDataError
from services.booking.domain.factory import BookingPeriodFactory
from services.booking.domain.repository import BookingRepository, CarRateRepository
from services.booking.domain.service import (
    BookingAmountVerifier,
    BookingCostCalculator,
    BookingDomainService,
    BookingEligibilityService,
    LegSegmenter,
)
from services.shared.domain import DomainEventPublisher
from services.shared.utils import clock

logger = Logger(child=True)


class BookingRequest(TypedDict):
    """予約作成リクエストの入力データ構造（TypedDict）"""

    customer_id: str
    car_id: str
    booking_type: BookingType | str
    start_date: date | datetime
    end_date: NotRequired[date | datetime | None]
    pickup_time: NotRequired[str | None]
    pickup_address: str
    dropoff_address: str
    include_security_detail: NotRequired[bool]
    special_requests: NotRequired[str | None]
    client_total_amount: Decimal


class CreateBookingService:
    """予約作成のユースケース"""

    def __init__(
        self,
        repository: BookingRepository,
        car_rate_repository: CarRateRepository,
        cost_calculator: BookingCostCalculator,
        event_publisher: DomainEventPublisher,
        period_factory: BookingPeriodFactory | None = None,
        segmenter: LegSegmenter | None = None,
        domain_service: BookingDomainService | None = None,
        eligibility: BookingEligibilityService | None = None,
        amount_verifier: BookingAmountVerifier | None = None,
    ) -> None:
        self._repository = repository
        self._car_rate_repository = car_rate_repository
        self._cost_calculator = cost_calculator
        self._event_publisher = event_publisher
        self._period_factory = period_factory or BookingPeriodFactory()
        self._segmenter = segmenter or LegSegmenter()
        self._eligibility = eligibility or BookingEligibilityService()
        self._domain_service = domain_service or BookingDomainService(self._eligibility)
        self._amount_verifier = amount_verifier or BookingAmountVerifier()

    def create(self, request: BookingRequest, now: datetime | None = None) -> Booking:
        """料金を再計算し、クライアント提示額と一致する場合のみ予約を作成する"""
        current = now or clock.now()

        rates = self._car_rate_repository.find_rates(request["car_id"])
        if rates is None:
            raise MissingRateDataError(
                f"Rates are not configured for car {request['car_id']}",
                car_id=request["car_id"],
            )

        period = self._period_factory.create(
            booking_type=request["booking_type"],
            start_date=request["start_date"],
            end_date=request.get("end_date"),
            pickup_time=request.get("pickup_time"),
            now=current,
        )

        availability = self._eligibility.can_book_car_for_period(
            self._repository.find_by_car_id(request["car_id"], overlapping=period),
            period,
        )
        if not availability.is_eligible:
            raise CarUnavailableError(
                availability.reason or "Car is unavailable", car_id=request["car_id"]
            )

        leg_dates = self._segmenter.segment(period)
        costs = self._cost_calculator.calculate(
            rates,
            leg_dates,
            period,
            include_security_detail=request.get("include_security_detail", False),
        )
        self._amount_verifier.verify(request["client_total_amount"], costs.total_amount)

        booking = self._domain_service.create_booking(
            {
                "customer_id": request["customer_id"],
                "car_id": request["car_id"],
                "booking_period": period,
                "pickup_address": request["pickup_address"],
                "dropoff_address": request["dropoff_address"],
                "leg_dates": leg_dates,
                "precalculated_costs": costs,
                "special_requests": request.get("special_requests"),
            }
        )
        self._repository.save(booking)
        booking.mark_as_created()
        self._event_publisher.publish(booking.flush_domain_events())

        logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "booking_reference": booking.booking_reference,
                "legs": len(booking.legs),
                "total_amount": str(booking.financials.total_amount),
            },
        )
        return booking
