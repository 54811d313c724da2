from .booking_period_factory import BookingPeriodFactory as BookingPeriodFactory
