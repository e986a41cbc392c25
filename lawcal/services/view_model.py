"""Derived View Model - 集計・表示用の変換"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from lawcal.domain.models import Event, EventStats, EventStatus, EventType, Priority

ALL_DAY_LABEL = "All Day"


@dataclass(frozen=True)
class EventTypeStyle:
    """イベント種別の表示スタイル"""

    color_class: str
    label: str


_DEFAULT_TYPE_STYLE = EventTypeStyle("bg-muted text-muted-foreground border-border", "Other")

_EVENT_TYPE_STYLES: dict[EventType, EventTypeStyle] = {
    EventType.MEETING: EventTypeStyle("bg-primary/10 text-primary border-primary/20", "Meeting"),
    EventType.HEARING: EventTypeStyle(
        "bg-destructive/10 text-destructive border-destructive/20", "Hearing"
    ),
    EventType.COURT_DATE: EventTypeStyle(
        "bg-destructive/10 text-destructive border-destructive/20", "Court Date"
    ),
    EventType.DEADLINE: EventTypeStyle("bg-warning/10 text-warning border-warning/20", "Deadline"),
    EventType.FILING: EventTypeStyle("bg-warning/10 text-warning border-warning/20", "Filing"),
    EventType.CONSULTATION: EventTypeStyle(
        "bg-accent/10 text-accent border-accent/20", "Consultation"
    ),
    EventType.OTHER: _DEFAULT_TYPE_STYLE,
}

_PRIORITY_COLORS: dict[Priority, str] = {
    Priority.HIGH: "bg-destructive/10 text-destructive",
    Priority.MEDIUM: "bg-warning/10 text-warning",
    Priority.LOW: "bg-muted/10 text-muted-foreground",
}
_DEFAULT_PRIORITY_COLOR = _PRIORITY_COLORS[Priority.LOW]

_STATUS_COLORS: dict[EventStatus, str] = {
    EventStatus.SCHEDULED: "bg-blue-100 text-blue-800",
    EventStatus.CONFIRMED: "bg-green-100 text-green-800",
    EventStatus.COMPLETED: "bg-gray-100 text-gray-800",
    EventStatus.CANCELLED: "bg-red-100 text-red-800",
    EventStatus.POSTPONED: "bg-yellow-100 text-yellow-800",
}
_DEFAULT_STATUS_COLOR = _STATUS_COLORS[EventStatus.POSTPONED]


def event_type_style(event_type: EventType | str) -> EventTypeStyle:
    """種別 → (色クラス, ラベル)。未知の値は other 扱い"""
    try:
        return _EVENT_TYPE_STYLES[EventType(event_type)]
    except ValueError:
        return _DEFAULT_TYPE_STYLE


def priority_color(priority: Priority | str) -> str:
    try:
        return _PRIORITY_COLORS[Priority(priority)]
    except ValueError:
        return _DEFAULT_PRIORITY_COLOR


def status_color(status: EventStatus | str) -> str:
    try:
        return _STATUS_COLORS[EventStatus(status)]
    except ValueError:
        return _DEFAULT_STATUS_COLOR


def format_clock(value: datetime) -> str:
    """12時間表記 例: "9:05 AM" """
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def format_event_time(start: datetime, end: datetime, all_day: bool) -> str:
    """表示用の時間帯。終日なら "All Day"、それ以外は "9:00 AM - 10:30 AM" """
    if all_day:
        return ALL_DAY_LABEL
    return f"{format_clock(start)} - {format_clock(end)}"


def display_location(event: Event) -> str | None:
    """場所の表示。オンライン会議のリンクがあればそちらを優先する"""
    return event.meeting_link or event.location or None


def can_send_reminder(event: Event, now: datetime) -> bool:
    """リマインダー送信ボタンを出すか（予定済み・未送信・未来のイベント）"""
    return (
        event.status == EventStatus.SCHEDULED
        and not event.reminder_sent
        and event.start_time >= now
    )


def compute_stats(events: Iterable[Event]) -> EventStats:
    """種別・ステータス別に件数を集計する"""
    type_counts = {t: 0 for t in EventType}
    status_counts = {s: 0 for s in EventStatus}
    total = 0
    for event in events:
        total += 1
        type_counts[event.event_type] += 1
        status_counts[event.status] += 1

    return EventStats(
        total=total,
        hearings=type_counts[EventType.HEARING],
        court_dates=type_counts[EventType.COURT_DATE],
        deadlines=type_counts[EventType.DEADLINE],
        meetings=type_counts[EventType.MEETING],
        consultations=type_counts[EventType.CONSULTATION],
        scheduled=status_counts[EventStatus.SCHEDULED],
        confirmed=status_counts[EventStatus.CONFIRMED],
        completed=status_counts[EventStatus.COMPLETED],
    )
