from .booking_errors import BookingAmountMismatchError as BookingAmountMismatchError
from .booking_errors import (
    BookingCannotBeActivatedError as BookingCannotBeActivatedError,
)
from .booking_errors import (
    BookingCannotBeCancelledError as BookingCannotBeCancelledError,
)
from .booking_errors import (
    BookingCannotBeCompletedError as BookingCannotBeCompletedError,
)
from .booking_errors import (
    BookingCannotBeConfirmedError as BookingCannotBeConfirmedError,
)
from .booking_errors import BookingIneligibleError as BookingIneligibleError
from .booking_errors import BookingNotFoundError as BookingNotFoundError
from .booking_errors import BookingNotPersistedError as BookingNotPersistedError
from .booking_errors import CarUnavailableError as CarUnavailableError
from .booking_errors import ChauffeurAssignmentError as ChauffeurAssignmentError
from .booking_errors import (
    InvalidBookingStatusTransitionError as InvalidBookingStatusTransitionError,
)
from .booking_errors import (
    InvalidLegStatusTransitionError as InvalidLegStatusTransitionError,
)
from .booking_errors import LegNotFoundError as LegNotFoundError
from .booking_errors import (
    PaymentVerificationFailedError as PaymentVerificationFailedError,
)
from .booking_period_errors import InvalidBookingPeriodError as InvalidBookingPeriodError
from .booking_period_errors import PastBookingTimeError as PastBookingTimeError
from .booking_period_errors import (
    SameDayBookingRestrictionError as SameDayBookingRestrictionError,
)
from .financial_errors import InvalidFinancialAmountError as InvalidFinancialAmountError
from .financial_errors import MissingRateDataError as MissingRateDataError
from .financial_errors import (
    NegativeFinancialAmountError as NegativeFinancialAmountError,
)
from .financial_errors import (
    NonPositiveFinancialAmountError as NonPositiveFinancialAmountError,
)
