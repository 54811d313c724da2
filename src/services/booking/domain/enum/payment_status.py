from enum import Enum


class PaymentStatus(str, Enum):
    """予約の支払いステータス"""

    UNPAID = "UNPAID"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    REFUND_PROCESSING = "REFUND_PROCESSING"
    REFUND_FAILED = "REFUND_FAILED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
