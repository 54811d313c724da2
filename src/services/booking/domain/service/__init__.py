from .booking_amount_verifier import BookingAmountVerifier as BookingAmountVerifier
from .booking_cost_calculator import BookingCostCalculator as BookingCostCalculator
from .booking_domain_service import BookingDomainService as BookingDomainService
from .booking_domain_service import CreateBookingCommand as CreateBookingCommand
from .booking_eligibility_service import (
    BookingEligibilityService as BookingEligibilityService,
)
from .booking_eligibility_service import EligibilityResult as EligibilityResult
from .leg_pricer import LegPricer as LegPricer
from .leg_segmenter import LegSegmenter as LegSegmenter
from .payment_verification_service import (
    PaymentVerificationResult as PaymentVerificationResult,
)
from .payment_verification_service import (
    PaymentVerificationService as PaymentVerificationService,
)
