import os
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

BUSINESS_TIMEZONE = ZoneInfo(os.getenv("BUSINESS_TIMEZONE", "Africa/Lagos"))


def now() -> datetime:
    """業務タイムゾーンでの現在時刻"""
    return datetime.now(timezone.utc).astimezone(BUSINESS_TIMEZONE)


def to_business_time(value: datetime) -> datetime:
    """datetime を業務タイムゾーンに正規化する

    naive な datetime は業務タイムゾーンのローカル時刻として扱う。
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=BUSINESS_TIMEZONE)
    return value.astimezone(BUSINESS_TIMEZONE)


def at_local(day: date, at: time) -> datetime:
    """業務タイムゾーンで日付と時刻を組み立てる"""
    return datetime.combine(day, at, tzinfo=BUSINESS_TIMEZONE)


def start_of_day(value: datetime) -> datetime:
    """業務タイムゾーンでのその日の 0 時"""
    return at_local(to_business_time(value).date(), time(0, 0))


def minute_window(value: datetime) -> tuple[datetime, datetime]:
    """value を含む1分間の時間窓 [start, end)"""
    start = to_business_time(value).replace(second=0, microsecond=0)
    return start, start + timedelta(minutes=1)
