import json
import os
from collections.abc import Sequence

import boto3
from aws_lambda_powertools import Logger

from services.shared.domain import DomainEvent, DomainEventPublisher

logger = Logger(child=True)

EVENT_SOURCE = "car-booking.booking"
_MAX_ENTRIES_PER_REQUEST = 10


class EventBridgeDomainEventPublisher(DomainEventPublisher):
    """EventBridge にドメインイベントを送信する"""

    def __init__(self, event_bus_name: str | None = None) -> None:
        self.event_bus_name = event_bus_name or os.getenv("EVENT_BUS_NAME", "default")
        self.client = boto3.client("events")

    def publish(self, events: Sequence[DomainEvent]) -> None:
        entries = [self._to_entry(event) for event in events]
        for i in range(0, len(entries), _MAX_ENTRIES_PER_REQUEST):
            chunk = entries[i : i + _MAX_ENTRIES_PER_REQUEST]
            response = self.client.put_events(Entries=chunk)
            if response.get("FailedEntryCount", 0):
                logger.error(
                    "Some domain events were not delivered",
                    extra={
                        "failed_entry_count": response["FailedEntryCount"],
                        "entries": response.get("Entries", []),
                    },
                )

    def _to_entry(self, event: DomainEvent) -> dict:
        return {
            "Source": EVENT_SOURCE,
            "DetailType": event.event_type,
            "Detail": json.dumps(event.to_dict(), default=str),
            "EventBusName": self.event_bus_name,
        }
