from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PaymentVerificationResult:
    """決済ゲートウェイでの検証結果"""

    success: bool
    transaction_id: str
    amount: Decimal | None = None
    error_message: str | None = None


class PaymentVerificationService(ABC):
    """決済ゲートウェイの検証インターフェース（具象実装は外部連携側）"""

    @abstractmethod
    def verify_payment(
        self, transaction_id: str, expected_amount: Decimal
    ) -> PaymentVerificationResult:
        raise NotImplementedError
