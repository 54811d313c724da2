from decimal import Decimal

import pytest

from services.booking.domain.enum import BookingStatus, BookingType, LegStatus
from services.booking.domain.exception import (
    BookingCannotBeActivatedError,
    BookingCannotBeCancelledError,
    BookingCannotBeCompletedError,
)
from services.booking.domain.service import BookingDomainService, LegSegmenter
from services.booking.domain.value_object import BookingPeriod


class TestBookingDomainService:
    @pytest.fixture
    def service(self):
        return BookingDomainService()

    @pytest.fixture
    def build_command(self, rates, cost_calculator):
        def _factory(period: BookingPeriod) -> dict:
            leg_dates = LegSegmenter().segment(period)
            return {
                "customer_id": "customer-1",
                "car_id": "car-1",
                "booking_period": period,
                "pickup_address": "1 Marina Road, Lagos",
                "dropoff_address": "Murtala Muhammed Airport",
                "leg_dates": leg_dates,
                "precalculated_costs": cost_calculator.calculate(rates, leg_dates, period),
            }

        return _factory

    def test_create_day_booking(self, service, build_command, day_period, at):
        booking = service.create_booking(build_command(day_period))

        assert booking.id is None
        assert booking.status == BookingStatus.PENDING
        assert booking.financials.total_amount == Decimal("12100")
        assert [(leg.leg_start_time, leg.leg_end_time) for leg in booking.legs] == [
            (at(2025, 1, 15, 9), at(2025, 1, 15, 21)),
            (at(2025, 1, 16, 9), at(2025, 1, 16, 21)),
        ]
        assert all(leg.status == LegStatus.PENDING for leg in booking.legs)
        assert all(leg.total_daily_price == Decimal("5000") for leg in booking.legs)
        assert all(
            leg.items_net_value_for_leg == Decimal("5000") for leg in booking.legs
        )
        assert all(
            leg.fleet_owner_earning_for_leg == Decimal("4500") for leg in booking.legs
        )

    def test_create_full_day_booking(self, service, build_command, at):
        period = BookingPeriod(at(2025, 2, 15, 10), at(2025, 2, 17, 10), BookingType.FULL_DAY)

        booking = service.create_booking(build_command(period))

        assert booking.financials.net_total == Decimal("18000")
        assert [leg.leg_start_time for leg in booking.legs] == [
            at(2025, 2, 15, 10),
            at(2025, 2, 16, 10),
        ]
        assert booking.legs[0].leg_end_time == at(2025, 2, 16, 10)

    def test_create_night_booking_legs_cross_midnight(self, service, build_command, at):
        period = BookingPeriod(at(2025, 1, 15, 23), at(2025, 1, 17, 5), BookingType.NIGHT)

        booking = service.create_booking(build_command(period))

        assert [(leg.leg_start_time, leg.leg_end_time) for leg in booking.legs] == [
            (at(2025, 1, 15, 23), at(2025, 1, 16, 5)),
            (at(2025, 1, 16, 23), at(2025, 1, 17, 5)),
        ]
        assert booking.financials.net_total == Decimal("8000")

    def test_leg_count_mismatch_raises_error(self, service, build_command, day_period, at):
        command = build_command(day_period)
        command["leg_dates"] = [at(2025, 1, 15)]

        with pytest.raises(ValueError):
            service.create_booking(command)

    def test_cancel_booking_inside_cutoff_raises_error(self, service, create_booking, at):
        booking = create_booking(status=BookingStatus.CONFIRMED)

        with pytest.raises(BookingCannotBeCancelledError):
            service.cancel_booking(booking, now=at(2025, 1, 14, 22))

        assert booking.status == BookingStatus.CONFIRMED

    def test_cancel_booking_before_cutoff(self, service, create_booking, at):
        booking = create_booking(status=BookingStatus.CONFIRMED)

        service.cancel_booking(booking, "Change of plans", now=at(2025, 1, 14, 20))

        assert booking.status == BookingStatus.CANCELLED
        assert booking.cancellation_reason == "Change of plans"

    def test_activate_booking_requires_eligibility(self, service, create_booking, at):
        booking = create_booking(status=BookingStatus.CONFIRMED)
        with pytest.raises(BookingCannotBeActivatedError):
            service.activate_booking(booking, at(2025, 1, 15, 9))

        booking = create_booking(chauffeur_id="chauffeur-1")
        service.activate_booking(booking, at(2025, 1, 15, 9))
        assert booking.status == BookingStatus.ACTIVE

    def test_complete_booking_requires_eligibility(self, service, create_booking, at):
        booking = create_booking(status=BookingStatus.ACTIVE)
        with pytest.raises(BookingCannotBeCompletedError):
            service.complete_booking(booking, at(2025, 1, 16, 12))

        service.complete_booking(booking, at(2025, 1, 16, 21))
        assert booking.status == BookingStatus.COMPLETED
