from .booking import Booking as Booking
from .booking import BookingProps as BookingProps
from .leg import Leg as Leg
from .leg import LegProps as LegProps
