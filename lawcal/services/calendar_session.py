"""CalendarSession - カレンダー画面の状態とイベント一覧の所有者

処理フロー:
1. フィルター・表示モード・選択日の変更
2. Query/Filter Engine でクエリパラメータを再構築
3. EventStore から一覧を取得し、メモリ上の一覧を置き換える
4. 各種投影（日/週/月）・集計は一覧から都度計算する

変更系（削除・リマインド）はストアの成功後にローカルの一覧へ反映する
（write-then-reflect。ロールバックは存在しない）。
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import date, datetime

from lawcal.domain.errors import LawCalError
from lawcal.domain.models import (
    CaseSummary,
    DayCell,
    Event,
    EventFilters,
    EventStats,
    ViewMode,
)
from lawcal.domain.ports import CaseDirectory, EventStore
from lawcal.services import projection
from lawcal.services.query import build_query_params
from lawcal.services.view_model import compute_stats

logger = logging.getLogger(__name__)


class CalendarSession:
    """
    表示中のカレンダー画面1つ分の状態。

    一覧の取得にはシーケンス番号を振り、最後に反映した番号より古いレスポンスは
    捨てる（後から発行したリクエストの結果が常に勝つ）。
    """

    def __init__(
        self,
        store: EventStore,
        case_directory: CaseDirectory | None = None,
        clock: Callable[[], datetime] = datetime.now,
        selected_date: date | None = None,
        view_mode: ViewMode = ViewMode.MONTH,
    ) -> None:
        """
        Args:
            store: イベントストア
            case_directory: 案件一覧の取得元（Noneなら案件を読み込まない）
            clock: 現在時刻（テストで固定するため注入）
            selected_date: 初期選択日（Noneなら今日）
            view_mode: 初期表示モード
        """
        self._store = store
        self._case_directory = case_directory
        self._clock = clock

        self.selected_date: date = selected_date or clock().date()
        self.view_mode = view_mode
        self.filters = EventFilters()
        self.detail_event: Event | None = None
        self.cases: list[CaseSummary] = []
        self.error: str | None = None
        self.loading = False

        self._events: list[Event] = []
        self._issued_seq = 0
        self._applied_seq = 0

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    @property
    def store(self) -> EventStore:
        return self._store

    def now(self) -> datetime:
        return self._clock()

    # ─── 一覧取得 ─────────────────────────────────────────────────────────────

    def begin_list(self) -> tuple[int, dict[str, str]]:
        """一覧取得リクエストを発行する。(シーケンス番号, クエリパラメータ) を返す"""
        self._issued_seq += 1
        params = build_query_params(self.filters, self.view_mode, self.selected_date)
        return self._issued_seq, params

    def apply_list(self, seq: int, events: list[Event]) -> bool:
        """
        取得結果を反映する。

        Returns:
            bool: 反映した場合 True、古いレスポンスとして捨てた場合 False
        """
        if seq < self._applied_seq:
            logger.info(
                "Discarding stale event list (seq=%d, applied=%d)", seq, self._applied_seq
            )
            return False
        self._applied_seq = seq
        self._events = list(events)
        self.error = None
        return True

    def fail_list(self, seq: int, error: Exception) -> None:
        """取得失敗を記録する。既存の一覧は残す（古くても何も出ないよりよい）"""
        if seq < self._applied_seq:
            return
        self.error = str(error)

    @property
    def needs_full_retry(self) -> bool:
        """一覧が空のまま取得に失敗した状態（全画面の再試行表示）"""
        return self.error is not None and not self._events

    def refresh(self) -> list[Event]:
        """
        現在のフィルター・表示モード・選択日で一覧を取得し直す。

        Raises:
            LawCalError: 取得に失敗した場合（error に記録した上で再送出）
        """
        seq, params = self.begin_list()
        self.loading = True
        try:
            events = self._store.list_events(params)
        except LawCalError as e:
            logger.exception("Failed to fetch events")
            self.fail_list(seq, e)
            raise
        finally:
            self.loading = False

        self.apply_list(seq, events)
        return self.events

    def load_cases(self) -> list[CaseSummary]:
        """案件一覧を読み込む。失敗しても画面は続行する（ログのみ）"""
        if self._case_directory is None:
            return self.cases
        try:
            self.cases = self._case_directory.list_cases()
        except LawCalError:
            logger.exception("Failed to fetch cases")
        return self.cases

    # ─── 画面操作 ─────────────────────────────────────────────────────────────

    def set_filters(self, filters: EventFilters) -> list[Event]:
        self.filters = filters
        return self.refresh()

    def set_search(self, text: str) -> list[Event]:
        # デバウンスなし（入力毎に再取得）
        self.filters = dataclasses.replace(self.filters, search=text)
        return self.refresh()

    def set_view_mode(self, view_mode: ViewMode) -> list[Event]:
        self.view_mode = view_mode
        return self.refresh()

    def select_date(self, day: date) -> list[Event]:
        self.selected_date = day
        return self.refresh()

    def show_detail(self, event: Event) -> None:
        self.detail_event = event

    def close_detail(self) -> None:
        self.detail_event = None

    # ─── ローカル一覧への反映 ───────────────────────────────────────────────────

    def add_created(self, event: Event) -> None:
        """作成されたイベントを先頭に追加"""
        self._events.insert(0, event)

    def replace_event(self, event: Event) -> None:
        """同じidのイベントを置き換える"""
        self._events = [event if e.id == event.id else e for e in self._events]

    def delete(self, event_id: int) -> None:
        """
        イベントを削除し、一覧から取り除く。

        詳細表示中のイベントだった場合は詳細表示も閉じる。

        Raises:
            LawCalError: ストアでの削除に失敗した場合（一覧は変更しない）
        """
        self._store.delete_event(event_id)
        self._events = [e for e in self._events if e.id != event_id]
        if self.detail_event is not None and self.detail_event.id == event_id:
            self.detail_event = None

    def remind(self, event_id: int) -> None:
        """
        リマインダーを送信し、ローカルのイベントに送信済みフラグを立てる。

        正のレコードを取り直さず、ローカルで reminder_sent=True を付ける。
        このフラグを False に戻す操作は存在しない。
        """
        self._store.send_reminder(event_id)
        sent_at = self._clock()

        def _stamp(event: Event) -> Event:
            return dataclasses.replace(
                event, reminder_sent=True, last_reminder_sent_at=sent_at
            )

        self._events = [_stamp(e) if e.id == event_id else e for e in self._events]
        if self.detail_event is not None and self.detail_event.id == event_id:
            self.detail_event = _stamp(self.detail_event)

    # ─── 投影・集計 ─────────────────────────────────────────────────────────────

    def todays_events(self) -> list[Event]:
        """選択日のイベント"""
        return projection.events_on_date(self._events, self.selected_date)

    def week_events(self) -> list[Event]:
        return projection.events_in_week(self._events, self.selected_date)

    def week_grid(self) -> list[DayCell]:
        return projection.week_grid(self._events, self.selected_date)

    def day_slots(self) -> dict[int, list[Event]]:
        return projection.day_slots(self._events, self.selected_date)

    def month_buckets(self) -> dict[date, list[Event]]:
        return projection.month_buckets(
            self._events, self.selected_date.year, self.selected_date.month
        )

    def upcoming_events(self, limit: int = projection.UPCOMING_LIMIT) -> list[Event]:
        return projection.upcoming(self._events, self._clock(), limit)

    def stats(self) -> EventStats:
        return compute_stats(self._events)
