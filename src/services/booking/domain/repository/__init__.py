from .booking_repository import BookingRepository as BookingRepository
from .rate_repositories import AddonRateRepository as AddonRateRepository
from .rate_repositories import CarRateRepository as CarRateRepository
from .rate_repositories import PlatformFeeRepository as PlatformFeeRepository
