from .booking_financials import BookingFinancials as BookingFinancials
from .booking_period import BookingPeriod as BookingPeriod
from .cost_breakdown import CostBreakdown as CostBreakdown
from .pickup_time import PickupTime as PickupTime
from .platform_fee_rates import PlatformFeeRates as PlatformFeeRates
from .rate_schedule import RateSchedule as RateSchedule
