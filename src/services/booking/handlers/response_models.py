from pydantic import BaseModel

from services.booking.domain.entity import Booking, Leg


class LegData(BaseModel):
    """レッグのレスポンスモデル"""

    leg_id: str
    leg_date: str
    leg_start_time: str
    leg_end_time: str
    total_daily_price: str
    status: str


class BookingData(BaseModel):
    """予約データのレスポンスモデル"""

    booking_id: str
    booking_reference: str
    customer_id: str
    car_id: str
    booking_type: str
    start_date_time: str
    end_date_time: str
    status: str
    payment_status: str
    chauffeur_id: str | None
    total_amount: str
    net_total: str
    security_detail_cost: str
    platform_service_fee_amount: str
    vat_amount: str
    legs: list[LegData]


class SuccessResponse(BaseModel):
    """成功レスポンスモデル"""

    status: str = "success"
    data: BookingData


def _to_leg_data(leg: Leg) -> LegData:
    return LegData(
        leg_id=leg.id,
        leg_date=leg.leg_date.isoformat(),
        leg_start_time=leg.leg_start_time.isoformat(),
        leg_end_time=leg.leg_end_time.isoformat(),
        total_daily_price=str(leg.total_daily_price),
        status=leg.status.value,
    )


def to_response(booking: Booking) -> dict:
    """Booking 集約をレスポンス辞書に変換する"""
    period = booking.booking_period
    financials = booking.financials
    return SuccessResponse(
        data=BookingData(
            booking_id=str(booking.id),
            booking_reference=booking.booking_reference,
            customer_id=booking.customer_id,
            car_id=booking.car_id,
            booking_type=period.booking_type.value,
            start_date_time=period.start_date_time.isoformat(),
            end_date_time=period.end_date_time.isoformat(),
            status=booking.status.value,
            payment_status=booking.payment_status.value,
            chauffeur_id=booking.chauffeur_id,
            total_amount=str(financials.total_amount),
            net_total=str(financials.net_total),
            security_detail_cost=str(financials.security_detail_cost),
            platform_service_fee_amount=str(financials.platform_service_fee_amount),
            vat_amount=str(financials.vat_amount),
            legs=[_to_leg_data(leg) for leg in booking.legs],
        )
    ).model_dump()
