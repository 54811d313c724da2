from abc import abstractmethod
from datetime import datetime

from services.booking.domain.entity import Booking
from services.booking.domain.enum import BookingStatus
from services.booking.domain.value_object import BookingPeriod
from services.shared.domain import Repository


class BookingRepository(Repository[Booking, str, BookingStatus]):
    """予約リポジトリのインターフェース"""

    @abstractmethod
    def save(self, booking: Booking) -> None:
        """新規予約を保存し、採番した ID を mark_persisted で割り当てる"""
        raise NotImplementedError

    @abstractmethod
    def update(
        self, booking: Booking, expected_status: BookingStatus | None = None
    ) -> None:
        """予約とレッグを更新する（expected_status で楽観ロック）"""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_leg_start_window(self, start: datetime, end: datetime) -> list[Booking]:
        """[start, end) に開始するレッグを持つ予約を検索する"""
        raise NotImplementedError

    @abstractmethod
    def find_by_leg_end_window(self, start: datetime, end: datetime) -> list[Booking]:
        """[start, end) に終了するレッグを持つ予約を検索する"""
        raise NotImplementedError

    @abstractmethod
    def find_by_car_id(
        self, car_id: str, overlapping: BookingPeriod | None = None
    ) -> list[Booking]:
        """車両の予約を検索する（overlapping 指定時は期間が重なり得るものに絞る）"""
        raise NotImplementedError
