import re
from dataclasses import dataclass, field

_PICKUP_TIME_PATTERN = re.compile(r"^(1[0-2]|0?[1-9]):([0-5]\d)\s?(AM|PM)$", re.IGNORECASE)


@dataclass(frozen=True)
class PickupTime:
    """送迎開始時刻（"8:00 AM" 形式）"""

    value: str
    _hour: int = field(init=False, repr=False, compare=False)
    _minute: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"Invalid pickup time: {self.value!r}")
        normalized = self.value.strip().upper()
        match = _PICKUP_TIME_PATTERN.match(normalized)
        if match is None:
            raise ValueError(
                f"Invalid pickup time: {self.value!r} (expected format like '8:00 AM')"
            )
        hour = int(match.group(1)) % 12
        if match.group(3) == "PM":
            hour += 12
        object.__setattr__(self, "value", normalized)
        object.__setattr__(self, "_hour", hour)
        object.__setattr__(self, "_minute", int(match.group(2)))

    def to_24_hour(self) -> tuple[int, int]:
        """(時, 分) の 24 時間表記に変換する"""
        return self._hour, self._minute

    def __str__(self) -> str:
        return self.value
