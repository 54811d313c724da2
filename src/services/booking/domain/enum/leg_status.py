from enum import Enum


class LegStatus(str, Enum):
    """予約レッグ（1日単位の区間）のステータス"""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, target: "LegStatus") -> bool:
        return target in _LEG_TRANSITIONS[self]

    def is_terminal(self) -> bool:
        return not _LEG_TRANSITIONS[self]


_LEG_TRANSITIONS: dict[LegStatus, frozenset[LegStatus]] = {
    # 支払い確定前に開始時刻を迎えた場合も ACTIVE へ進める
    LegStatus.PENDING: frozenset(
        {LegStatus.CONFIRMED, LegStatus.ACTIVE, LegStatus.CANCELLED}
    ),
    LegStatus.CONFIRMED: frozenset({LegStatus.ACTIVE, LegStatus.CANCELLED}),
    LegStatus.ACTIVE: frozenset({LegStatus.COMPLETED}),
    LegStatus.COMPLETED: frozenset(),
    LegStatus.CANCELLED: frozenset(),
}
