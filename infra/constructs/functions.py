import datetime

from aws_cdk import Duration
from aws_cdk import aws_dynamodb as dynamodb
from aws_cdk import aws_events as events
from aws_cdk import aws_lambda as _lambda
from constructs import Construct

SERVICE_NAME = "booking-service"
BUSINESS_TIMEZONE = "Africa/Lagos"


class Functions(Construct):
    """Lambda 関数を管理する Construct"""

    def __init__(
        self,
        scope: Construct,
        id: str,
        table: dynamodb.Table,
        event_bus: events.EventBus,
        common_layer: _lambda.LayerVersion,
    ) -> None:
        super().__init__(scope, id)
        self._table = table
        self._event_bus = event_bus
        self._common_layer = common_layer

        self.create_booking = self._create_function(
            "CreateBookingLambda",
            "services.booking.handlers.create.lambda_handler",
        )

        self.cancel_booking = self._create_function(
            "CancelBookingLambda",
            "services.booking.handlers.cancel.lambda_handler",
        )

        self.assign_chauffeur = self._create_function(
            "AssignChauffeurLambda",
            "services.booking.handlers.assign_chauffeur.lambda_handler",
        )

        # 毎分起動のため 1 分以内に終わらせる
        self.process_legs = self._create_function(
            "ProcessBookingLegsLambda",
            "services.booking.handlers.process_legs.lambda_handler",
            timeout=Duration.seconds(55),
        )

        for fn in self.all_functions:
            table.grant_read_write_data(fn)
            event_bus.grant_put_events_to(fn)

    @property
    def all_functions(self) -> list[_lambda.Function]:
        return [
            self.create_booking,
            self.cancel_booking,
            self.assign_chauffeur,
            self.process_legs,
        ]

    def _create_function(
        self,
        id: str,
        handler: str,
        timeout: Duration = Duration.seconds(10),
    ) -> _lambda.Function:
        return _lambda.Function(
            self,
            id,
            runtime=_lambda.Runtime.PYTHON_3_14,
            handler=handler,
            code=_lambda.Code.from_asset("src"),
            layers=[self._common_layer],
            timeout=timeout,
            environment={
                "TABLE_NAME": self._table.table_name,
                "EVENT_BUS_NAME": self._event_bus.event_bus_name,
                "BUSINESS_TIMEZONE": BUSINESS_TIMEZONE,
                "POWERTOOLS_SERVICE_NAME": SERVICE_NAME,
                "DEPLOY_TIME": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            },
        )
