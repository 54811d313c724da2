from decimal import Decimal

import pytest
from pydantic import ValidationError

from services.booking.domain.enum import BookingStatus
from services.booking.handlers.request_models import (
    AssignChauffeurRequest,
    CreateBookingRequest,
)
from services.booking.handlers.response_models import to_response


@pytest.fixture
def create_body() -> dict:
    return {
        "customer_id": "customer-1",
        "car_id": "car-1",
        "booking_type": "DAY",
        "start_date": "2025-01-15",
        "end_date": "2025-01-16",
        "pickup_time": "9:00 AM",
        "pickup_address": "1 Marina Road, Lagos",
        "dropoff_address": "Murtala Muhammed Airport",
        "total_amount": 12100.5,
    }


class TestCreateBookingRequest:
    def test_amount_is_converted_without_float_error(self, create_body):
        request = CreateBookingRequest(**create_body)
        assert request.total_amount == Decimal("12100.5")

    def test_day_booking_requires_pickup_time(self, create_body):
        del create_body["pickup_time"]
        with pytest.raises(ValidationError, match="pickup_time is required"):
            CreateBookingRequest(**create_body)

    def test_night_booking_without_pickup_time(self, create_body):
        create_body["booking_type"] = "NIGHT"
        del create_body["pickup_time"]

        request = CreateBookingRequest(**create_body)

        assert request.pickup_time is None

    @pytest.mark.parametrize("amount", [0, -1, "abc", True])
    def test_invalid_amount(self, create_body, amount):
        create_body["total_amount"] = amount
        with pytest.raises(ValidationError):
            CreateBookingRequest(**create_body)

    def test_unknown_booking_type(self, create_body):
        create_body["booking_type"] = "WEEKLY"
        with pytest.raises(ValidationError):
            CreateBookingRequest(**create_body)


class TestAssignChauffeurRequest:
    def test_empty_chauffeur_id_is_rejected(self):
        with pytest.raises(ValidationError):
            AssignChauffeurRequest(
                chauffeur_id="", fleet_owner_id="owner-1", assigned_by="admin-1"
            )


class TestToResponse:
    def test_amounts_are_serialized_as_strings(self, create_booking):
        booking = create_booking(status=BookingStatus.CONFIRMED, chauffeur_id="c-1")

        response = to_response(booking)

        data = response["data"]
        assert response["status"] == "success"
        assert data["booking_id"] == "booking-123"
        assert data["status"] == "CONFIRMED"
        assert data["total_amount"] == "12100"
        assert data["chauffeur_id"] == "c-1"
        assert [leg["total_daily_price"] for leg in data["legs"]] == ["5000", "5000"]
