from datetime import datetime
from unittest.mock import MagicMock

import pytest

from services.shared.utils.clock import BUSINESS_TIMEZONE


@pytest.fixture
def at():
    """業務タイムゾーンの datetime を生成するヘルパー"""

    def _at(
        year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
    ) -> datetime:
        return datetime(year, month, day, hour, minute, second, tzinfo=BUSINESS_TIMEZONE)

    return _at


@pytest.fixture
def mock_repository():
    """リポジトリのモックフィクスチャ"""
    return MagicMock()


@pytest.fixture
def mock_event_publisher():
    """イベント発行のモックフィクスチャ"""
    return MagicMock()
