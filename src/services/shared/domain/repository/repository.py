from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")
ID = TypeVar("ID")
S = TypeVar("S")


class Repository(ABC, Generic[T, ID, S]):
    """集約リポジトリの基底クラス

    - save: 新規集約を保存し、ID を採番する
    - update: 読み込み時のステータス S を条件に上書きする（楽観ロック）
    """

    @abstractmethod
    def save(self, aggregate: T) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(self, aggregate: T, expected_status: S | None = None) -> None:
        """条件不一致の場合は OptimisticLockException を送出する"""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, id: ID) -> T | None:
        raise NotImplementedError
