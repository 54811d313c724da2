from decimal import Decimal

from services.booking.domain.exception import BookingAmountMismatchError
from services.shared.utils.validators import to_decimal

AMOUNT_TOLERANCE = Decimal("0.01")


class BookingAmountVerifier:
    """クライアントが提示した合計金額をサーバ計算値と照合する"""

    def verify(self, client_amount: Decimal, server_amount: Decimal) -> None:
        client = to_decimal(client_amount)
        server = to_decimal(server_amount)
        if abs(client - server) > AMOUNT_TOLERANCE:
            raise BookingAmountMismatchError(client, server)
