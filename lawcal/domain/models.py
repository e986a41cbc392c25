"""ドメインモデル - 外部依存なしのデータ構造"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class EventType(str, Enum):
    """イベント種別"""

    MEETING = "meeting"
    DEADLINE = "deadline"
    HEARING = "hearing"
    COURT_DATE = "court_date"
    FILING = "filing"
    CONSULTATION = "consultation"
    OTHER = "other"


class EventStatus(str, Enum):
    """イベントのステータス"""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class Priority(str, Enum):
    """優先度"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ViewMode(str, Enum):
    """カレンダーの表示モード"""

    MONTH = "month"
    WEEK = "week"
    DAY = "day"


DEFAULT_REMINDER_MINUTES = 30


@dataclass(frozen=True)
class Event:
    """カレンダーイベント（ストアが採番・監査情報を付与したもの）"""

    id: int
    title: str
    start_time: datetime  # タイムゾーンなし（ローカル時刻）
    end_time: datetime
    case_id: int
    event_type: EventType = EventType.MEETING
    status: EventStatus = EventStatus.SCHEDULED
    priority: Priority = Priority.MEDIUM
    all_day: bool = False
    description: str | None = None
    location: str | None = None
    meeting_link: str | None = None
    address: str | None = None
    # ストアが付与する表示用フィールド
    case_title: str | None = None
    case_number: str | None = None
    client_name: str | None = None
    assigned_to_user_id: int | None = None
    assigned_to_name: str | None = None
    client_invited: bool = False
    client_confirmed: bool = False
    reminder_minutes_before: int = DEFAULT_REMINDER_MINUTES
    reminder_sent: bool = False  # false → true のみ
    last_reminder_sent_at: datetime | None = None
    is_recurring: bool = False
    recurrence_pattern: str | None = None  # 展開はしない
    document_id: int | None = None
    document_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CreateEventData:
    """イベント作成時の入力データ（idを持たない）"""

    title: str
    case_id: int
    start_time: datetime
    end_time: datetime
    event_type: EventType = EventType.MEETING
    status: EventStatus = EventStatus.SCHEDULED
    priority: Priority = Priority.MEDIUM
    all_day: bool = False
    description: str | None = None
    location: str | None = None
    meeting_link: str | None = None
    address: str | None = None
    assigned_to_user_id: int | None = None
    client_invited: bool = False
    client_confirmed: bool = False
    reminder_minutes_before: int = DEFAULT_REMINDER_MINUTES
    is_recurring: bool = False
    recurrence_pattern: str | None = None
    recurrence_end_date: str | None = None
    document_id: int | None = None


@dataclass(frozen=True)
class UpdateEventData:
    """イベント更新時に送信する変更可能フィールド一式

    PUTは部分更新ではないため、変更していないフィールドも常に全て送る。
    """

    title: str
    start_time: datetime
    end_time: datetime
    event_type: EventType
    status: EventStatus
    priority: Priority
    all_day: bool
    description: str | None
    location: str | None
    meeting_link: str | None
    address: str | None
    assigned_to_user_id: int | None
    client_invited: bool
    client_confirmed: bool
    reminder_minutes_before: int
    is_recurring: bool
    recurrence_pattern: str | None
    document_id: int | None

    @classmethod
    def from_event(cls, event: Event) -> "UpdateEventData":
        """編集中のEventから送信用データを作る"""
        return cls(
            title=event.title,
            description=event.description,
            event_type=event.event_type,
            status=event.status,
            priority=event.priority,
            start_time=event.start_time,
            end_time=event.end_time,
            all_day=event.all_day,
            location=event.location,
            meeting_link=event.meeting_link,
            address=event.address,
            assigned_to_user_id=event.assigned_to_user_id,
            client_invited=event.client_invited,
            client_confirmed=event.client_confirmed,
            reminder_minutes_before=event.reminder_minutes_before,
            is_recurring=event.is_recurring,
            recurrence_pattern=event.recurrence_pattern,
            document_id=event.document_id,
        )


@dataclass(frozen=True)
class EventFilters:
    """一覧取得時のフィルター（永続化しない）

    空文字列は「未指定」として扱う。
    """

    status: str = ""
    event_type: str = ""
    assigned_to: str = ""
    search: str = ""
    case_id: str = ""


@dataclass(frozen=True)
class CaseSummary:
    """案件の概要（案件選択・表示用）"""

    id: int
    case_number: str = ""
    title: str = ""
    client_name: str = ""
    assigned_to: str = ""

    @property
    def label(self) -> str:
        """セレクタ表示用ラベル 例: "2025-CV-001 - Smith v. Jones" """
        if self.case_number:
            return f"{self.case_number} - {self.title}"
        return self.title


@dataclass(frozen=True)
class EventStats:
    """イベント集計（種別・ステータス別の件数）"""

    total: int = 0
    hearings: int = 0
    court_dates: int = 0
    deadlines: int = 0
    meetings: int = 0
    consultations: int = 0
    scheduled: int = 0
    confirmed: int = 0
    completed: int = 0

    @property
    def court_events(self) -> int:
        """裁判関連（hearing + court_date）の合計"""
        return self.hearings + self.court_dates


@dataclass(frozen=True)
class DayCell:
    """週表示の1日分のセル"""

    day: date
    events: list[Event] = field(default_factory=list)
    overflow: int = 0  # 表示しきれない件数（"+N more"）
