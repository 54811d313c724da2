from aws_cdk import aws_apigateway as apigw
from aws_cdk import aws_lambda as _lambda
from constructs import Construct


class Api(Construct):
    """API Gateway Construct"""

    def __init__(
        self,
        scope: Construct,
        id: str,
        create_booking: _lambda.Function,
        cancel_booking: _lambda.Function,
        assign_chauffeur: _lambda.Function,
    ) -> None:
        super().__init__(scope, id)

        self.rest_api = apigw.RestApi(
            self,
            "BookingRestApi",
            rest_api_name="Car Booking API",
            deploy_options=apigw.StageOptions(
                stage_name="prod",
                throttling_burst_limit=20,
                throttling_rate_limit=10,
            ),
        )

        # POST /bookings
        bookings = self.rest_api.root.add_resource("bookings")
        bookings.add_method("POST", apigw.LambdaIntegration(create_booking))

        booking = bookings.add_resource("{booking_id}")

        # POST /bookings/{booking_id}/cancel
        booking.add_resource("cancel").add_method(
            "POST", apigw.LambdaIntegration(cancel_booking)
        )

        # POST /bookings/{booking_id}/chauffeur
        booking.add_resource("chauffeur").add_method(
            "POST", apigw.LambdaIntegration(assign_chauffeur)
        )
