from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from services.booking.domain.enum import BookingType
from services.shared.utils import to_decimal


class CreateBookingRequest(BaseModel):
    """予約作成リクエストモデル"""

    customer_id: str = Field(..., min_length=1)
    car_id: str = Field(..., min_length=1)
    booking_type: BookingType
    start_date: datetime | date
    end_date: datetime | date | None = None
    pickup_time: str | None = Field(
        default=None, description="DAY 予約の開始時刻（例: '8:00 AM'）"
    )
    pickup_address: str = Field(..., min_length=1)
    dropoff_address: str = Field(..., min_length=1)
    include_security_detail: bool = False
    special_requests: str | None = Field(default=None, max_length=1000)
    total_amount: Decimal = Field(
        ...,
        gt=0,
        description="クライアントが表示した合計金額（サーバ計算値と照合する）",
    )

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        return to_decimal(v)

    @model_validator(mode="after")
    def require_pickup_time_for_day(self) -> "CreateBookingRequest":
        if self.booking_type == BookingType.DAY and not self.pickup_time:
            raise ValueError("pickup_time is required for DAY bookings")
        return self


class CancelBookingRequest(BaseModel):
    """予約キャンセルリクエストモデル"""

    reason: str | None = Field(default=None, max_length=500)


class AssignChauffeurRequest(BaseModel):
    """運転手割り当てリクエストモデル"""

    chauffeur_id: str = Field(..., min_length=1)
    fleet_owner_id: str = Field(..., min_length=1)
    assigned_by: str = Field(..., min_length=1)
