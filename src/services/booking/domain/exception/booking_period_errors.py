from services.shared.domain.exception import BusinessRuleViolationException


class InvalidBookingPeriodError(BusinessRuleViolationException):
    """予約期間のリクエストが不正"""

    code = "INVALID_BOOKING_PERIOD"


class PastBookingTimeError(InvalidBookingPeriodError):
    code = "PAST_BOOKING_TIME"


class SameDayBookingRestrictionError(InvalidBookingPeriodError):
    code = "SAME_DAY_BOOKING_RESTRICTED"
