from datetime import date

import pytest

from services.booking.domain.enum import BookingType
from services.booking.domain.exception import (
    InvalidBookingPeriodError,
    PastBookingTimeError,
    SameDayBookingRestrictionError,
)
from services.booking.domain.factory import BookingPeriodFactory


class TestBookingPeriodFactory:
    @pytest.fixture
    def factory(self):
        return BookingPeriodFactory()

    def test_day_booking_is_twelve_hours_from_pickup(self, factory, at):
        period = factory.create(
            BookingType.DAY,
            start_date=date(2025, 1, 15),
            end_date=date(2025, 1, 16),
            pickup_time="9:00 AM",
            now=at(2025, 1, 10, 8),
        )

        assert period.start_date_time == at(2025, 1, 15, 9)
        assert period.end_date_time == at(2025, 1, 16, 21)
        assert period.booking_type == BookingType.DAY

    def test_day_booking_defaults_to_single_day(self, factory, at):
        period = factory.create(
            "DAY", start_date=date(2025, 1, 15), pickup_time="7:30 AM", now=at(2025, 1, 10)
        )
        assert period.end_date_time == at(2025, 1, 15, 19, 30)

    @pytest.mark.parametrize("pickup_time", ["6:59 AM", "12:00 PM", "9:00 PM"])
    def test_day_pickup_outside_morning_window_is_rejected(self, factory, at, pickup_time):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(
                BookingType.DAY,
                start_date=date(2025, 1, 15),
                pickup_time=pickup_time,
                now=at(2025, 1, 10),
            )

    def test_day_booking_requires_pickup_time(self, factory, at):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(BookingType.DAY, start_date=date(2025, 1, 15), now=at(2025, 1, 10))

    def test_day_end_date_before_start_is_rejected(self, factory, at):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(
                BookingType.DAY,
                start_date=date(2025, 1, 15),
                end_date=date(2025, 1, 14),
                pickup_time="9:00 AM",
                now=at(2025, 1, 10),
            )

    def test_night_booking_runs_from_eleven_pm_to_five_am(self, factory, at):
        period = factory.create(
            BookingType.NIGHT,
            start_date=date(2025, 1, 15),
            pickup_time="9:00 AM",
            now=at(2025, 1, 10),
        )

        assert period.start_date_time == at(2025, 1, 15, 23)
        assert period.end_date_time == at(2025, 1, 16, 5)

    def test_night_booking_must_end_on_later_date(self, factory, at):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(
                BookingType.NIGHT,
                start_date=date(2025, 1, 15),
                end_date=date(2025, 1, 15),
                now=at(2025, 1, 10),
            )

    def test_full_day_booking_in_24_hour_units(self, factory, at):
        period = factory.create(
            BookingType.FULL_DAY,
            start_date=at(2025, 2, 15, 10),
            end_date=at(2025, 2, 17, 10),
            now=at(2025, 2, 1),
        )
        assert period.duration.total_seconds() == 48 * 3600

    @pytest.mark.parametrize(
        "start_hour, end_kwargs",
        [
            (10, {"day": 16, "hour": 9}),  # 24 時間未満
            (10, {"day": 16, "hour": 22}),  # 24 時間の倍数でない
            (6, {"day": 16, "hour": 6}),  # 開始時刻が早すぎる
            (23, {"day": 16, "hour": 23}),  # 開始時刻が遅すぎる
        ],
    )
    def test_full_day_rule_violations(self, factory, at, start_hour, end_kwargs):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(
                BookingType.FULL_DAY,
                start_date=at(2025, 2, 15, start_hour),
                end_date=at(2025, 2, end_kwargs["day"], end_kwargs["hour"]),
                now=at(2025, 2, 1),
            )

    def test_full_day_requires_datetimes(self, factory, at):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create(
                BookingType.FULL_DAY,
                start_date=date(2025, 2, 15),
                end_date=date(2025, 2, 16),
                now=at(2025, 2, 1),
            )

    def test_past_start_is_rejected(self, factory, at):
        with pytest.raises(PastBookingTimeError):
            factory.create(
                BookingType.DAY,
                start_date=date(2025, 1, 15),
                pickup_time="9:00 AM",
                now=at(2025, 1, 15, 10),
            )

    def test_same_day_booking_after_noon_is_rejected(self, factory, at):
        """正午以降は当日開始の予約を受け付けない"""
        with pytest.raises(SameDayBookingRestrictionError):
            factory.create(
                BookingType.FULL_DAY,
                start_date=at(2025, 1, 15, 22),
                end_date=at(2025, 1, 16, 22),
                now=at(2025, 1, 15, 13),
            )

    def test_same_day_booking_before_noon_is_allowed(self, factory, at):
        period = factory.create(
            BookingType.DAY,
            start_date=date(2025, 1, 15),
            pickup_time="10:00 AM",
            now=at(2025, 1, 15, 8),
        )
        assert period.start_date_time == at(2025, 1, 15, 10)

    def test_same_day_night_booking_is_exempt(self, factory, at):
        period = factory.create(
            BookingType.NIGHT, start_date=date(2025, 1, 15), now=at(2025, 1, 15, 18)
        )
        assert period.start_date_time == at(2025, 1, 15, 23)

    def test_unknown_booking_type_is_rejected(self, factory, at):
        with pytest.raises(InvalidBookingPeriodError):
            factory.create("WEEKLY", start_date=date(2025, 1, 15), now=at(2025, 1, 10))

    def test_reconstitute_skips_type_rules(self, factory, at):
        """復元時は 23.5 時間の FULL_DAY も受け入れる"""
        period = factory.reconstitute(
            BookingType.FULL_DAY, at(2025, 2, 15, 10), at(2025, 2, 16, 9, 30)
        )
        assert period.booking_type == BookingType.FULL_DAY
