from services.shared.domain.exception import DomainException


class InvalidFinancialAmountError(DomainException):
    """金額が不正（非有限値など）"""

    code = "INVALID_FINANCIAL_AMOUNT"


class NonPositiveFinancialAmountError(InvalidFinancialAmountError):
    code = "NON_POSITIVE_FINANCIAL_AMOUNT"


class NegativeFinancialAmountError(InvalidFinancialAmountError):
    code = "NEGATIVE_FINANCIAL_AMOUNT"


class MissingRateDataError(DomainException):
    """料金計算に必要なレートが存在しない、または不正"""

    code = "MISSING_RATE_DATA"
