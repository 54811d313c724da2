from .addon_type import AddonType as AddonType
from .booking_status import BookingStatus as BookingStatus
from .booking_type import BookingType as BookingType
from .leg_position import LegPosition as LegPosition
from .leg_status import LegStatus as LegStatus
from .payment_status import PaymentStatus as PaymentStatus
