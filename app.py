#!/usr/bin/env python3

import aws_cdk as cdk

from car_booking_stack import CarBookingStack

app = cdk.App()
CarBookingStack(
    app,
    "CarBookingStack",
)

app.synth()
