from enum import Enum


class LegPosition(str, Enum):
    """予約期間内でのレッグの位置"""

    ONLY = "ONLY"
    FIRST = "FIRST"
    MIDDLE = "MIDDLE"
    LAST = "LAST"
