"""Calendar Projection - イベント一覧を日/週/月に振り分ける純粋関数群"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable

from lawcal.domain.models import DayCell, Event, EventStatus
from lawcal.services.query import week_bounds

# 日表示の時間枠（8:00〜19:00、両端含む）。枠外に始まるイベントは表示されない
DAY_VIEW_FIRST_HOUR = 8
DAY_VIEW_LAST_HOUR = 19
WEEK_CELL_MAX_EVENTS = 3
UPCOMING_LIMIT = 5


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _by_start(events: Iterable[Event]) -> list[Event]:
    return sorted(events, key=lambda e: e.start_time)


def events_on_date(events: Iterable[Event], day: date | datetime) -> list[Event]:
    """start_time の日付が day と一致するイベント（end_time との重なりは見ない）"""
    target = _as_date(day)
    return [e for e in events if e.start_time.date() == target]


def events_in_week(events: Iterable[Event], selected: date | datetime) -> list[Event]:
    """selected を含む週（日曜始まり）に始まるイベントを開始時刻順で返す"""
    start, end = week_bounds(_as_date(selected))
    return _by_start(e for e in events if start <= e.start_time <= end)


def upcoming(
    events: Iterable[Event], now: datetime, limit: int = UPCOMING_LIMIT
) -> list[Event]:
    """now 以降に始まる scheduled のイベントを開始時刻順に最大 limit 件"""
    if limit <= 0:
        return []
    candidates = [
        e for e in events if e.start_time >= now and e.status == EventStatus.SCHEDULED
    ]
    return _by_start(candidates)[:limit]


def day_slots(events: Iterable[Event], day: date | datetime) -> dict[int, list[Event]]:
    """
    日表示用に、day のイベントを1時間枠に振り分ける。

    - 枠は 8時〜19時（両端含む）の12枠で、イベントが無くても全枠を返す
    - 終日イベントは除外
    - 枠外の時刻に始まるイベントはどの枠にも入らない
    """
    slots: dict[int, list[Event]] = {
        hour: [] for hour in range(DAY_VIEW_FIRST_HOUR, DAY_VIEW_LAST_HOUR + 1)
    }
    for event in events_on_date(events, day):
        if event.all_day:
            continue
        bucket = slots.get(event.start_time.hour)
        if bucket is not None:
            bucket.append(event)
    return slots


def week_grid(
    events: Iterable[Event],
    selected: date | datetime,
    max_per_day: int = WEEK_CELL_MAX_EVENTS,
) -> list[DayCell]:
    """週表示用の7日分のセル。1セルには最大 max_per_day 件、残りは overflow"""
    pool = list(events)
    start, _ = week_bounds(_as_date(selected))
    cells = []
    for offset in range(7):
        day = start.date() + timedelta(days=offset)
        day_events = events_on_date(pool, day)
        cells.append(
            DayCell(
                day=day,
                events=day_events[:max_per_day],
                overflow=max(len(day_events) - max_per_day, 0),
            )
        )
    return cells


def month_buckets(
    events: Iterable[Event], year: int, month: int
) -> dict[date, list[Event]]:
    """月表示用に、その月の全日付をキーとしてイベントを振り分ける"""
    _, days_in_month = calendar.monthrange(year, month)
    buckets: dict[date, list[Event]] = {
        date(year, month, d): [] for d in range(1, days_in_month + 1)
    }
    for event in _by_start(events):
        bucket = buckets.get(event.start_time.date())
        if bucket is not None:
            bucket.append(event)
    return buckets
