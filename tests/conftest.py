"""共通テストフィクスチャ

全テストから利用可能なモックオブジェクトとサンプルデータを提供。

モックの作成:
- MagicMock(spec=ABC) でABCのメソッドシグネチャを保持
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from lawcal.domain.models import (
    CaseSummary,
    Event,
    EventStatus,
    EventType,
    Priority,
)
from lawcal.domain.ports import CaseDirectory, CredentialProvider, EventStore
from lawcal.services.calendar_session import CalendarSession
from tests.factories import NOW, SELECTED

# ========== サンプルデータ ==========


@pytest.fixture
def sample_hearing() -> Event:
    """サンプルイベント: 審問"""
    return Event(
        id=7,
        title="Motion hearing",
        start_time=datetime(2026, 1, 10, 14, 0),
        end_time=datetime(2026, 1, 10, 15, 0),
        case_id=3,
        event_type=EventType.HEARING,
        priority=Priority.HIGH,
        location="Courtroom 4B",
        case_title="Smith v. Jones",
        case_number="2025-CV-001",
        client_name="Alice Smith",
    )


@pytest.fixture
def sample_meeting() -> Event:
    """サンプルイベント: オンライン打ち合わせ"""
    return Event(
        id=8,
        title="Client call",
        start_time=datetime(2026, 1, 12, 10, 30),
        end_time=datetime(2026, 1, 12, 11, 0),
        case_id=3,
        event_type=EventType.MEETING,
        meeting_link="https://meet.example.com/abc",
        location="Office",
    )


@pytest.fixture
def sample_deadline() -> Event:
    """サンプルイベント: 完了済みの提出期限（過去）"""
    return Event(
        id=9,
        title="Discovery responses due",
        start_time=datetime(2026, 1, 5, 17, 0),
        end_time=datetime(2026, 1, 5, 17, 0),
        case_id=4,
        event_type=EventType.DEADLINE,
        status=EventStatus.COMPLETED,
    )


@pytest.fixture
def sample_events(sample_hearing, sample_meeting, sample_deadline) -> list[Event]:
    return [sample_hearing, sample_meeting, sample_deadline]


@pytest.fixture
def sample_case() -> CaseSummary:
    return CaseSummary(
        id=3,
        case_number="2025-CV-001",
        title="Smith v. Jones",
        client_name="Alice Smith",
        assigned_to="J. Doe",
    )


# ========== モックフィクスチャ ==========


@pytest.fixture
def mock_store(sample_events) -> MagicMock:
    """EventStore のモック"""
    mock = MagicMock(spec=EventStore)
    mock.list_events.return_value = sample_events
    return mock


@pytest.fixture
def mock_cases(sample_case) -> MagicMock:
    """CaseDirectory のモック"""
    mock = MagicMock(spec=CaseDirectory)
    mock.list_cases.return_value = [sample_case]
    return mock


@pytest.fixture
def mock_credentials() -> MagicMock:
    """CredentialProvider のモック"""
    mock = MagicMock(spec=CredentialProvider)
    mock.current_token.return_value = "test-token"
    return mock


@pytest.fixture
def session(mock_store, mock_cases) -> CalendarSession:
    """時刻を固定した CalendarSession（一覧未取得）"""
    return CalendarSession(
        store=mock_store,
        case_directory=mock_cases,
        clock=lambda: NOW,
        selected_date=SELECTED,
    )
