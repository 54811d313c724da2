import json
from unittest.mock import patch

import pytest

from services.booking.domain.event import BookingCancelledEvent
from services.booking.infrastructure.eventbridge_event_publisher import (
    EVENT_SOURCE,
    EventBridgeDomainEventPublisher,
)


@pytest.fixture
def client():
    with patch(
        "services.booking.infrastructure.eventbridge_event_publisher.boto3"
    ) as mock_boto3:
        client = mock_boto3.client.return_value
        client.put_events.return_value = {"FailedEntryCount": 0, "Entries": []}
        yield client


@pytest.fixture
def publisher(client):
    return EventBridgeDomainEventPublisher(event_bus_name="car-booking-events")


def _event(at, i: int) -> BookingCancelledEvent:
    return BookingCancelledEvent(
        occurred_at=at(2025, 1, 14, 8),
        booking_id=f"booking-{i}",
        booking_reference=f"BK-{i}",
        customer_id="customer-1",
        reason="Cancelled by customer",
    )


class TestEventBridgeDomainEventPublisher:
    def test_entry_format(self, publisher, client, at):
        publisher.publish([_event(at, 1)])

        entry = client.put_events.call_args.kwargs["Entries"][0]
        assert entry["Source"] == EVENT_SOURCE
        assert entry["DetailType"] == "BookingCancelledEvent"
        assert entry["EventBusName"] == "car-booking-events"
        detail = json.loads(entry["Detail"])
        assert detail["booking_id"] == "booking-1"
        assert detail["reason"] == "Cancelled by customer"

    def test_events_are_sent_in_chunks_of_ten(self, publisher, client, at):
        publisher.publish([_event(at, i) for i in range(12)])

        sizes = [len(c.kwargs["Entries"]) for c in client.put_events.call_args_list]
        assert sizes == [10, 2]

    def test_no_events_no_call(self, publisher, client):
        publisher.publish([])
        client.put_events.assert_not_called()
