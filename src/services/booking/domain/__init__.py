from .entity import Booking as Booking
from .entity import Leg as Leg
from .enum import BookingStatus as BookingStatus
from .enum import BookingType as BookingType
from .enum import LegStatus as LegStatus
from .enum import PaymentStatus as PaymentStatus
from .factory import BookingPeriodFactory as BookingPeriodFactory
from .repository import BookingRepository as BookingRepository
from .value_object import BookingFinancials as BookingFinancials
from .value_object import BookingPeriod as BookingPeriod
