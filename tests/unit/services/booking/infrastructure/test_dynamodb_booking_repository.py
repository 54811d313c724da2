import copy
from unittest.mock import patch

import pytest
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from services.booking.domain.enum import BookingStatus, LegStatus
from services.booking.infrastructure.dynamodb_booking_repository import (
    DynamoDBBookingRepository,
    minute_bucket,
)
from services.shared.domain.exception import (
    DuplicateResourceException,
    OptimisticLockException,
)


class InMemoryBookingTable:
    """PK/SK と条件式（=, attribute_not_exists, AND）だけを解釈するテスト用テーブル"""

    def __init__(self) -> None:
        self.items: dict[tuple[str, str], dict] = {}

    def query(self, **kwargs) -> dict:
        _, pk = kwargs["KeyConditionExpression"].get_expression()["values"]
        items = [
            copy.deepcopy(item)
            for (item_pk, _), item in sorted(self.items.items())
            if item_pk == pk
        ]
        return {"Items": items}

    def transact_write_items(self, TransactItems: list[dict]) -> dict:
        reasons = []
        for entry in TransactItems:
            put = entry["Put"]
            key = (put["Item"]["PK"], put["Item"]["SK"])
            passed = self._matches(put["ConditionExpression"], self.items.get(key))
            reasons.append({"Code": "None" if passed else "ConditionalCheckFailed"})
        if any(r["Code"] != "None" for r in reasons):
            raise ClientError(
                {
                    "Error": {"Code": "TransactionCanceledException"},
                    "CancellationReasons": reasons,
                },
                "TransactWriteItems",
            )
        for entry in TransactItems:
            item = copy.deepcopy(entry["Put"]["Item"])
            self.items[(item["PK"], item["SK"])] = item
        return {}

    def _matches(self, condition, item: dict | None) -> bool:
        expression = condition.get_expression()
        operator, values = expression["operator"], expression["values"]
        if operator == "AND":
            return all(self._matches(value, item) for value in values)
        if operator == "attribute_not_exists":
            return item is None or values[0].name not in item
        if operator == "=":
            return item is not None and item.get(values[0].name) == values[1]
        raise AssertionError(f"Unsupported condition: {operator}")


@pytest.fixture
def mock_boto3():
    with patch(
        "services.booking.infrastructure.dynamodb_booking_repository.boto3"
    ) as mock_boto3:
        yield mock_boto3


@pytest.fixture
def table(mock_boto3):
    return mock_boto3.resource.return_value.Table.return_value


@pytest.fixture
def client(mock_boto3):
    return mock_boto3.resource.return_value.meta.client


@pytest.fixture
def in_memory_table(table, client):
    fake = InMemoryBookingTable()
    table.query.side_effect = fake.query
    client.transact_write_items.side_effect = fake.transact_write_items
    return fake


@pytest.fixture
def repository(mock_boto3):
    return DynamoDBBookingRepository(table_name="booking-table")


def _transaction_failure(reason: str = "ConditionalCheckFailed") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": "TransactionCanceledException"},
            "CancellationReasons": [{"Code": reason}],
        },
        "TransactWriteItems",
    )


def _written_items(client) -> list[dict]:
    transact_items = client.transact_write_items.call_args.kwargs["TransactItems"]
    return [entry["Put"]["Item"] for entry in transact_items]


class TestMinuteBucket:
    def test_bucket_is_utc(self, at):
        # Africa/Lagos は UTC+1
        assert minute_bucket(at(2025, 1, 15, 9, 0, 45)) == "2025-01-15T08:00"


class TestDynamoDBBookingRepositoryWrites:
    def test_save_writes_booking_and_legs_in_one_transaction(
        self, repository, client, create_booking
    ):
        booking = create_booking(booking_id=None)

        repository.save(booking)

        assert booking.id is not None
        assert booking.version == 1
        client.transact_write_items.assert_called_once()
        items = _written_items(client)
        assert items[0]["PK"] == f"BOOKING#{booking.id}"
        assert items[0]["SK"] == "METADATA"
        assert items[0]["GSI3PK"] == "CAR#car-1"
        assert items[0]["GSI3SK"] == "START#2025-01-15T08:00:00+00:00"
        assert [i["SK"][:7] for i in items[1:]] == ["LEG#000", "LEG#001"]
        assert items[1]["GSI1PK"] == "LEG_START#2025-01-15T08:00"
        assert {i["version"] for i in items} == {1}
        assert all(leg.booking_id == booking.id for leg in booking.legs)

    def test_save_duplicate_raises(self, repository, client, create_booking):
        client.transact_write_items.side_effect = _transaction_failure()
        booking = create_booking()

        with pytest.raises(DuplicateResourceException):
            repository.save(booking)

        assert booking.version == 0

    def test_update_conditions_every_item_on_read_version(
        self, repository, client, create_booking
    ):
        booking = create_booking(status=BookingStatus.CONFIRMED)

        repository.update(booking, expected_status=BookingStatus.CONFIRMED)

        conditions = [
            entry["Put"]["ConditionExpression"]
            for entry in client.transact_write_items.call_args.kwargs["TransactItems"]
        ]
        assert conditions[0] == Attr("version").eq(0) & Attr("status").eq("CONFIRMED")
        assert conditions[1:] == [Attr("version").eq(0), Attr("version").eq(0)]
        assert booking.version == 1

    def test_cancelled_transaction_raises_optimistic_lock(
        self, repository, client, create_booking
    ):
        client.transact_write_items.side_effect = _transaction_failure()
        booking = create_booking()

        with pytest.raises(OptimisticLockException):
            repository.update(booking, expected_status=BookingStatus.PENDING)

        assert booking.version == 0

    def test_other_client_errors_propagate(self, repository, client, create_booking):
        client.transact_write_items.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException"}},
            "TransactWriteItems",
        )
        with pytest.raises(ClientError):
            repository.update(create_booking())

    def test_concurrent_leg_activation_only_one_write_wins(
        self, repository, in_memory_table, create_booking, at
    ):
        """ステータスが変わらない遷移でも、古い読み込みからの書き込みは失敗する"""
        repository.save(
            create_booking(
                status=BookingStatus.ACTIVE,
                leg_statuses=[LegStatus.COMPLETED, LegStatus.CONFIRMED],
            )
        )
        first_run = repository.find_by_id("booking-123")
        second_run = repository.find_by_id("booking-123")
        leg_id = first_run.legs[1].id

        first_run.activate_leg(leg_id, at(2025, 1, 16, 9))
        repository.update(first_run, expected_status=BookingStatus.ACTIVE)
        second_run.activate_leg(leg_id, at(2025, 1, 16, 9))

        with pytest.raises(OptimisticLockException):
            repository.update(second_run, expected_status=BookingStatus.ACTIVE)

        stored = repository.find_by_id("booking-123")
        assert stored.version == 2
        assert stored.legs[1].status == LegStatus.ACTIVE


class TestDynamoDBBookingRepositoryReads:
    def test_find_by_id_restores_aggregate(
        self, repository, in_memory_table, create_booking
    ):
        original = create_booking(
            status=BookingStatus.ACTIVE, chauffeur_id="chauffeur-1"
        )
        repository.save(original)

        restored = repository.find_by_id("booking-123")

        assert restored == original
        assert restored.version == original.version == 1
        assert restored.status == BookingStatus.ACTIVE
        assert restored.chauffeur_id == "chauffeur-1"
        assert restored.financials == original.financials
        assert restored.booking_period == original.booking_period
        assert [leg.id for leg in restored.legs] == [leg.id for leg in original.legs]
        assert [leg.status for leg in restored.legs] == [
            leg.status for leg in original.legs
        ]

    def test_find_by_id_not_found(self, repository, table):
        table.query.return_value = {"Items": []}
        assert repository.find_by_id("missing") is None

    def test_find_by_leg_start_window_queries_each_minute(
        self, repository, table, at
    ):
        table.query.return_value = {"Items": []}

        result = repository.find_by_leg_start_window(
            at(2025, 1, 15, 9), at(2025, 1, 15, 9, 2)
        )

        assert result == []
        conditions = [c.kwargs["KeyConditionExpression"] for c in table.query.call_args_list]
        assert conditions == [
            Key("GSI1PK").eq("LEG_START#2025-01-15T08:00"),
            Key("GSI1PK").eq("LEG_START#2025-01-15T08:01"),
        ]
        assert {c.kwargs["IndexName"] for c in table.query.call_args_list} == {"GSI1"}

    def test_leg_window_follows_pagination(self, repository, table, at):
        table.query.side_effect = [
            {"Items": [{"booking_id": "b-1"}], "LastEvaluatedKey": {"PK": "x"}},
            {"Items": [{"booking_id": "b-2"}]},
            {"Items": []},
            {"Items": []},
        ]

        repository.find_by_leg_end_window(at(2025, 1, 15, 21), at(2025, 1, 15, 21, 1))

        calls = table.query.call_args_list
        assert calls[1].kwargs["ExclusiveStartKey"] == {"PK": "x"}
        assert [c.kwargs["KeyConditionExpression"] for c in calls[2:]] == [
            Key("PK").eq("BOOKING#b-1"),
            Key("PK").eq("BOOKING#b-2"),
        ]

    def test_find_by_car_id_is_bounded_by_period(self, repository, table, day_period):
        table.query.return_value = {"Items": []}

        repository.find_by_car_id("car-1", overlapping=day_period)

        kwargs = table.query.call_args.kwargs
        assert kwargs["IndexName"] == "GSI3"
        assert kwargs["KeyConditionExpression"] == Key("GSI3PK").eq("CAR#car-1") & Key(
            "GSI3SK"
        ).lt("START#2025-01-16T20:00:00+00:00")
        assert kwargs["FilterExpression"] == Attr("end_date_time_utc").gt(
            "2025-01-15T08:00:00+00:00"
        )

    def test_find_by_car_id_follows_pagination(self, repository, table):
        table.query.side_effect = [
            {"Items": [{"booking_id": "b-1"}], "LastEvaluatedKey": {"PK": "x"}},
            {"Items": [{"booking_id": "b-1"}, {"booking_id": "b-2"}]},
            {"Items": []},
            {"Items": []},
        ]

        repository.find_by_car_id("car-1")

        calls = table.query.call_args_list
        assert len(calls) == 4
        assert calls[1].kwargs["ExclusiveStartKey"] == {"PK": "x"}
