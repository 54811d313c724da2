from aws_cdk import Duration
from aws_cdk import aws_events as events
from aws_cdk import aws_events_targets as targets
from aws_cdk import aws_lambda as _lambda
from constructs import Construct


class EventBus(Construct):
    """ドメインイベント配信用の EventBridge バス"""

    def __init__(self, scope: Construct, id: str) -> None:
        super().__init__(scope, id)

        self.event_bus = events.EventBus(
            self, "BookingEventBus", event_bus_name="car-booking-events"
        )


class Schedule(Construct):
    """レッグ状態更新ジョブの毎分スケジュール"""

    def __init__(
        self, scope: Construct, id: str, process_legs: _lambda.Function
    ) -> None:
        super().__init__(scope, id)

        self.rule = events.Rule(
            self,
            "ProcessBookingLegsRule",
            schedule=events.Schedule.rate(Duration.minutes(1)),
        )
        self.rule.add_target(
            targets.LambdaFunction(process_legs, retry_attempts=0)
        )
