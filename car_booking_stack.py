from aws_cdk import CfnOutput, Stack
from constructs import Construct

from infra.constructs import Api, Database, EventBus, Functions, Layers, Schedule


class CarBookingStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        database = Database(self, "Database")
        layers = Layers(self, "Layers")
        bus = EventBus(self, "EventBus")

        fns = Functions(
            self,
            "Functions",
            table=database.table,
            event_bus=bus.event_bus,
            common_layer=layers.common_layer,
        )

        api = Api(
            self,
            "Api",
            create_booking=fns.create_booking,
            cancel_booking=fns.cancel_booking,
            assign_chauffeur=fns.assign_chauffeur,
        )

        Schedule(self, "Schedule", process_legs=fns.process_legs)

        CfnOutput(self, "ApiUrl", value=api.rest_api.url)
