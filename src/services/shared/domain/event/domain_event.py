from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime


@dataclass(frozen=True)
class DomainEvent:
    """ドメインイベント基底クラス"""

    occurred_at: datetime

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return asdict(self)


class DomainEventPublisher(ABC):
    """ドメインイベント発行のインターフェース"""

    @abstractmethod
    def publish(self, events: Sequence[DomainEvent]) -> None:
        """イベントを発行する"""
        raise NotImplementedError
