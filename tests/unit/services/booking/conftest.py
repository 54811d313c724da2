from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from services.booking.domain.entity import Booking
from services.booking.domain.enum import BookingStatus, BookingType, LegStatus, PaymentStatus
from services.booking.domain.service import (
    BookingCostCalculator,
    BookingDomainService,
    LegSegmenter,
)
from services.booking.domain.value_object import (
    BookingPeriod,
    PlatformFeeRates,
    RateSchedule,
)

_DEFAULT_LEG_STATUS = {
    BookingStatus.PENDING: LegStatus.PENDING,
    BookingStatus.CONFIRMED: LegStatus.CONFIRMED,
    BookingStatus.ACTIVE: LegStatus.CONFIRMED,
    BookingStatus.COMPLETED: LegStatus.COMPLETED,
    BookingStatus.CANCELLED: LegStatus.CANCELLED,
    BookingStatus.REJECTED: LegStatus.CANCELLED,
}

_DEFAULT_PAYMENT_STATUS = {
    BookingStatus.PENDING: PaymentStatus.UNPAID,
    BookingStatus.REJECTED: PaymentStatus.UNPAID,
    BookingStatus.CANCELLED: PaymentStatus.REFUNDED,
}


@pytest.fixture
def rates():
    return RateSchedule(
        day_rate=Decimal("5000"),
        night_rate=Decimal("4000"),
        hourly_rate=Decimal("600"),
        full_day_rate=Decimal("9000"),
    )


@pytest.fixture
def fee_rates():
    return PlatformFeeRates(
        platform_service_fee_rate=Decimal("10"),
        fleet_owner_commission_rate=Decimal("10"),
        vat_rate=Decimal("10"),
    )


@pytest.fixture
def mock_platform_fee_repository(fee_rates):
    repository = MagicMock()
    repository.get_current_rates.return_value = fee_rates
    return repository


@pytest.fixture
def mock_addon_rate_repository():
    repository = MagicMock()
    repository.find_current_rate.return_value = None
    return repository


@pytest.fixture
def cost_calculator(mock_platform_fee_repository, mock_addon_rate_repository):
    return BookingCostCalculator(
        platform_fee_repository=mock_platform_fee_repository,
        addon_rate_repository=mock_addon_rate_repository,
    )


@pytest.fixture
def day_period(at):
    """1/15 09:00 - 1/16 21:00 の DAY 予約期間"""
    return BookingPeriod(
        start_date_time=at(2025, 1, 15, 9),
        end_date_time=at(2025, 1, 16, 21),
        booking_type=BookingType.DAY,
    )


@pytest.fixture
def create_booking(day_period, rates, cost_calculator):
    """永続化済みの Booking を生成する Factory fixture（Factories as fixtures パターン）"""

    def _factory(
        status: BookingStatus = BookingStatus.CONFIRMED,
        booking_id: str | None = "booking-123",
        period: BookingPeriod | None = None,
        chauffeur_id: str | None = None,
        leg_statuses: list[LegStatus] | None = None,
        car_id: str = "car-1",
    ) -> Booking:
        period = period or day_period
        leg_dates = LegSegmenter().segment(period)
        costs = cost_calculator.calculate(rates, leg_dates, period)
        booking = BookingDomainService().create_booking(
            {
                "customer_id": "customer-1",
                "car_id": car_id,
                "booking_period": period,
                "pickup_address": "1 Marina Road, Lagos",
                "dropoff_address": "Murtala Muhammed Airport",
                "leg_dates": leg_dates,
                "precalculated_costs": costs,
            }
        )
        if booking_id is None:
            return booking

        booking.mark_persisted(booking_id)
        props = booking.to_props()
        props["status"] = status
        props["payment_status"] = _DEFAULT_PAYMENT_STATUS.get(status, PaymentStatus.PAID)
        props["chauffeur_id"] = chauffeur_id
        for i, leg in enumerate(props["legs"]):
            leg["status"] = (
                leg_statuses[i] if leg_statuses else _DEFAULT_LEG_STATUS[status]
            )
        return Booking.reconstitute(props)

    return _factory
