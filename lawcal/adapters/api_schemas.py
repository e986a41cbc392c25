"""REST API のレスポンススキーマ

サーバーから返るJSONを pydantic で検証し、ドメインの dataclass に変換する。
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lawcal.domain.models import (
    DEFAULT_REMINDER_MINUTES,
    CaseSummary,
    Event,
    EventStatus,
    EventType,
    Priority,
)


def to_local_naive(value: Any) -> Any:
    """ISO8601文字列をタイムゾーンなしのローカル時刻に変換する

    オフセット付き（"...Z" / "+09:00"）の場合はローカル時刻に直してから
    tzinfo を落とす。オフセットなしの場合はそのまま扱う。
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


class EventPayload(BaseModel):
    """GET/POST/PUT /events のレスポンス1件分"""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    start_time: datetime
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
    case_title: str | None = None
    case_number: str | None = None
    client_name: str | None = None
    assigned_to_user_id: int | None = None
    assigned_to_name: str | None = None
    client_invited: bool = False
    client_confirmed: bool = False
    reminder_minutes_before: int = DEFAULT_REMINDER_MINUTES
    reminder_sent: bool = False
    last_reminder_sent_at: datetime | None = None
    is_recurring: bool = False
    recurrence_pattern: str | None = None
    document_id: int | None = None
    document_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        "start_time",
        "end_time",
        "last_reminder_sent_at",
        "created_at",
        "updated_at",
        mode="before",
    )
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return to_local_naive(value)

    @field_validator(
        "all_day",
        "client_invited",
        "client_confirmed",
        "reminder_sent",
        "is_recurring",
        mode="before",
    )
    @classmethod
    def _null_as_false(cls, value: Any) -> Any:
        # DBのNULLはfalse扱い
        return False if value is None else value

    @field_validator("reminder_minutes_before", mode="before")
    @classmethod
    def _null_reminder_minutes(cls, value: Any) -> Any:
        return DEFAULT_REMINDER_MINUTES if value is None else value

    @field_validator("event_type", mode="before")
    @classmethod
    def _unknown_type_as_other(cls, value: Any) -> Any:
        if value is None:
            return EventType.MEETING
        if not isinstance(value, str) or value not in {t.value for t in EventType}:
            return EventType.OTHER
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _lenient_status(cls, value: Any) -> Any:
        # NULL は作成時のデフォルト、未知の値は表示上のフォールバック（postponed）
        if value is None:
            return EventStatus.SCHEDULED
        if not isinstance(value, str) or value not in {s.value for s in EventStatus}:
            return EventStatus.POSTPONED
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _lenient_priority(cls, value: Any) -> Any:
        if value is None:
            return Priority.MEDIUM
        if not isinstance(value, str) or value not in {p.value for p in Priority}:
            return Priority.LOW
        return value

    def to_domain(self) -> Event:
        return Event(**self.model_dump())


class CasePayload(BaseModel):
    """GET /cases のレスポンス1件分

    サーバーのバージョンによってキー名が揺れるため別名も受け付ける。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    case_number: str | None = None
    title: str | None = None
    client_name: str | None = Field(default=None, alias="client")
    assigned_to: str | None = Field(default=None, alias="assignedTo")

    @field_validator("client_name", "assigned_to", mode="before")
    @classmethod
    def _flatten_name(cls, value: Any) -> Any:
        # {"name": "..."} 形式で返るケースがある
        if isinstance(value, dict):
            return value.get("name")
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def to_domain(self) -> CaseSummary:
        return CaseSummary(
            id=self.id,
            case_number=self.case_number or "",
            title=self.title or "",
            client_name=self.client_name or "",
            assigned_to=self.assigned_to or "",
        )
