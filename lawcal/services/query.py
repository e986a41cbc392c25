"""Query/Filter Engine - UIのフィルター状態から一覧取得パラメータを組み立てる"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from lawcal.domain.models import EventFilters, ViewMode

_DATE_FMT = "%Y-%m-%d"


def week_bounds(selected: date | datetime) -> tuple[datetime, datetime]:
    """
    selected を含む週（日曜始まり）の範囲を返す。

    Returns:
        (日曜 00:00:00, 土曜 23:59:59.999999)
    """
    day = selected.date() if isinstance(selected, datetime) else selected
    # weekday(): 月=0 ... 日=6 → 日曜からの経過日数に変換
    days_since_sunday = (day.weekday() + 1) % 7
    start = datetime.combine(day - timedelta(days=days_since_sunday), time.min)
    end = datetime.combine(start.date() + timedelta(days=6), time.max)
    return start, end


def build_query_params(
    filters: EventFilters,
    view_mode: ViewMode,
    selected: date | datetime,
) -> dict[str, str]:
    """
    フィルター・表示モード・選択日から GET /events のクエリパラメータを作る。

    - 等値フィルターと search は空でなければそのまま渡す
    - week: 選択日を含む週、day: 選択日のみを start_date/end_date で送る
    - month: 日付範囲は送らず全件取得し、月の振り分けはクライアント側で行う

    Args:
        filters: 現在のフィルター状態
        view_mode: 表示モード
        selected: 選択中の日付

    Returns:
        dict[str, str]: 挿入順を保ったクエリパラメータ
    """
    params: dict[str, str] = {}
    if filters.status:
        params["status"] = filters.status
    if filters.event_type:
        params["event_type"] = filters.event_type
    if filters.assigned_to:
        params["assigned_to_user_id"] = filters.assigned_to
    if filters.case_id:
        params["case_id"] = filters.case_id
    if filters.search:
        params["search"] = filters.search

    day = selected.date() if isinstance(selected, datetime) else selected
    if view_mode == ViewMode.WEEK:
        start, end = week_bounds(day)
        params["start_date"] = start.strftime(_DATE_FMT)
        params["end_date"] = end.strftime(_DATE_FMT)
    elif view_mode == ViewMode.DAY:
        params["start_date"] = day.strftime(_DATE_FMT)
        params["end_date"] = day.strftime(_DATE_FMT)
    # ViewMode.MONTH: 日付範囲なし

    return params
