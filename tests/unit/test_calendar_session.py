"""CalendarSession のテスト"""

from datetime import date, datetime

import pytest
from lawcal.domain.errors import AuthMissing, NetworkError, RequestFailed
from lawcal.domain.models import EventFilters, EventType, ViewMode
from lawcal.services.calendar_session import CalendarSession
from tests.factories import NOW, make_event


class TestRefresh:
    """一覧の再取得とエラー状態"""

    def test_month_view_fetches_without_window(self, session, mock_store, sample_events):
        """月表示は期間を指定せずに取得する"""
        # Act
        events = session.refresh()

        # Assert
        mock_store.list_events.assert_called_once_with({})
        assert events == sample_events
        assert session.error is None
        assert session.loading is False

    def test_filter_scenario_hearings_only(self, session, mock_store):
        """event_type=hearing を送り、ストアが絞り込んだ2件だけが残る"""
        # Arrange
        collection = [
            make_event(1, "2026-01-05T09:00", event_type=EventType.HEARING),
            make_event(2, "2026-01-06T09:00", event_type=EventType.MEETING),
            make_event(3, "2026-01-07T09:00", event_type=EventType.HEARING),
            make_event(4, "2026-01-08T09:00", event_type=EventType.DEADLINE),
            make_event(5, "2026-01-09T09:00", event_type=EventType.FILING),
        ]
        mock_store.list_events.side_effect = lambda params: [
            e for e in collection if e.event_type == params.get("event_type", e.event_type)
        ]

        # Act
        events = session.set_filters(EventFilters(event_type="hearing"))

        # Assert
        assert mock_store.list_events.call_args.args[0]["event_type"] == "hearing"
        assert [e.id for e in events] == [1, 3]

    def test_view_and_date_changes_refetch_with_window(self, session, mock_store):
        """表示モード・選択日の変更ごとに期間付きで再取得する"""
        # Act
        session.set_view_mode(ViewMode.WEEK)
        session.select_date(date(2026, 1, 14))
        session.set_view_mode(ViewMode.DAY)

        # Assert
        calls = [c.args[0] for c in mock_store.list_events.call_args_list]
        assert calls == [
            {"start_date": "2026-01-04", "end_date": "2026-01-10"},
            {"start_date": "2026-01-11", "end_date": "2026-01-17"},
            {"start_date": "2026-01-14", "end_date": "2026-01-14"},
        ]

    def test_every_search_change_refetches(self, session, mock_store):
        """検索文字列は入力ごとに再取得する（デバウンスなし）"""
        # Act
        session.set_search("d")
        session.set_search("de")

        # Assert
        assert mock_store.list_events.call_count == 2
        assert mock_store.list_events.call_args.args[0] == {"search": "de"}

    def test_failure_on_empty_collection_needs_full_retry(self, session, mock_store):
        """一覧が空のまま失敗した場合は全画面の再試行状態になる"""
        # Arrange
        mock_store.list_events.side_effect = NetworkError("connection refused")

        # Act
        with pytest.raises(NetworkError):
            session.refresh()

        # Assert
        assert session.error == "connection refused"
        assert session.needs_full_retry is True
        assert session.loading is False

    def test_failure_keeps_stale_events(self, session, mock_store, sample_events):
        """取得済みの一覧があれば失敗しても残す"""
        # Arrange
        session.refresh()
        mock_store.list_events.side_effect = RequestFailed(500, "Internal Server Error")

        # Act
        with pytest.raises(RequestFailed):
            session.set_view_mode(ViewMode.WEEK)

        # Assert
        assert session.events == sample_events
        assert session.error is not None
        assert session.needs_full_retry is False

    def test_auth_missing_surfaces(self, session, mock_store):
        """トークン未設定のエラーメッセージを error に記録する"""
        mock_store.list_events.side_effect = AuthMissing()
        with pytest.raises(AuthMissing):
            session.refresh()
        assert session.error == "No authentication token found"

    def test_success_clears_previous_error(self, session, mock_store, sample_events):
        """再取得に成功したら前回のエラーを消す"""
        # Arrange
        mock_store.list_events.side_effect = [NetworkError("down"), sample_events]
        with pytest.raises(NetworkError):
            session.refresh()

        # Act
        session.refresh()

        # Assert
        assert session.error is None


class TestListSequencing:
    """一覧取得のシーケンス番号による古いレスポンスの破棄"""

    def test_stale_response_discarded(self, session):
        """後から発行したリクエストの結果が、遅れて届いた古い結果に上書きされない"""
        # Arrange
        old_seq, _ = session.begin_list()
        new_seq, _ = session.begin_list()
        newer = [make_event(2, "2026-01-10T10:00")]
        older = [make_event(1, "2026-01-10T09:00")]

        # Act
        applied_new = session.apply_list(new_seq, newer)
        applied_old = session.apply_list(old_seq, older)

        # Assert
        assert applied_new is True
        assert applied_old is False
        assert session.events == newer

    def test_in_order_responses_applied(self, session):
        """発行順に届いたレスポンスはすべて反映する"""
        first, _ = session.begin_list()
        second, _ = session.begin_list()

        assert session.apply_list(first, [make_event(1, "2026-01-10T09:00")])
        assert session.apply_list(second, [])
        assert session.events == []

    def test_stale_failure_ignored(self, session):
        """反映済みより古いリクエストの失敗は error に記録しない"""
        # Arrange
        old_seq, _ = session.begin_list()
        new_seq, _ = session.begin_list()
        session.apply_list(new_seq, [])

        # Act
        session.fail_list(old_seq, NetworkError("late"))

        # Assert
        assert session.error is None


class TestDelete:
    """delete() の一覧・詳細表示への反映"""

    def test_removes_exactly_one_and_clears_detail(
        self, session, mock_store, sample_hearing
    ):
        """削除したイベントだけを取り除き、詳細表示を閉じる"""
        # Arrange
        session.refresh()
        session.show_detail(sample_hearing)

        # Act
        session.delete(7)

        # Assert
        mock_store.delete_event.assert_called_once_with(7)
        assert [e.id for e in session.events] == [8, 9]
        assert session.detail_event is None

    def test_detail_of_other_event_kept(self, session, sample_meeting):
        """別のイベントの詳細表示はそのまま"""
        # Arrange
        session.refresh()
        session.show_detail(sample_meeting)

        # Act
        session.delete(7)

        # Assert
        assert session.detail_event == sample_meeting

    def test_failure_leaves_collection_untouched(self, session, mock_store, sample_events):
        """ストアでの削除に失敗したら一覧は変更しない"""
        # Arrange
        session.refresh()
        mock_store.delete_event.side_effect = RequestFailed(404, "Event not found")

        # Act
        with pytest.raises(RequestFailed):
            session.delete(7)

        # Assert
        assert session.events == sample_events


class TestRemind:
    """remind() による送信済みフラグの反映"""

    def test_stamps_reminder_sent_locally(self, session, mock_store, sample_hearing):
        """取り直さずにローカルで reminder_sent と送信時刻を付ける"""
        # Arrange
        session.refresh()
        session.show_detail(sample_hearing)

        # Act
        session.remind(7)

        # Assert
        mock_store.send_reminder.assert_called_once_with(7)
        mock_store.get_event.assert_not_called()
        reminded = [e for e in session.events if e.id == 7][0]
        assert reminded.reminder_sent is True
        assert reminded.last_reminder_sent_at == NOW
        assert session.detail_event.reminder_sent is True
        assert all(not e.reminder_sent for e in session.events if e.id != 7)

    def test_failure_does_not_stamp(self, session, mock_store):
        """送信に失敗したらフラグを付けない"""
        # Arrange
        session.refresh()
        mock_store.send_reminder.side_effect = RequestFailed(500, "Mailer down")

        # Act
        with pytest.raises(RequestFailed):
            session.remind(7)

        # Assert
        assert all(not e.reminder_sent for e in session.events)

    def test_reminder_sent_never_reset(self, session, mock_store):
        """送信済みフラグは再リマインドで False に戻らない"""
        # Arrange
        session.refresh()

        # Act
        session.remind(7)
        session.remind(7)

        # Assert
        assert [e.reminder_sent for e in session.events if e.id == 7] == [True]


class TestCases:
    """案件一覧の読み込み"""

    def test_load_cases(self, session, sample_case):
        """読み込んだ案件を cases に保持する"""
        assert session.load_cases() == [sample_case]
        assert session.cases == [sample_case]

    def test_case_failure_is_logged_not_raised(self, session, mock_cases):
        """案件の取得失敗はログのみで画面は続行する"""
        mock_cases.list_cases.side_effect = NetworkError("down")
        assert session.load_cases() == []

    def test_without_directory(self, mock_store):
        """案件の取得元がなければ空のまま"""
        session = CalendarSession(mock_store, clock=lambda: NOW)
        assert session.load_cases() == []


class TestProjections:
    """セッション経由の投影・集計"""

    def test_day_view_scenario(self, session, mock_store, sample_hearing):
        """14時開始の審問は14時の枠に入り、9時の枠は空"""
        # Arrange
        session.view_mode = ViewMode.DAY
        session.refresh()

        # Act
        slots = session.day_slots()

        # Assert
        assert slots[14] == [sample_hearing]
        assert slots[9] == []

    def test_todays_week_and_upcoming(self, session):
        """選択日・週・今後の予定・集計"""
        # Arrange
        session.refresh()

        # Act & Assert
        assert [e.id for e in session.todays_events()] == [7]
        # 1/12 は翌週なので週には含まれない
        assert [e.id for e in session.week_events()] == [9, 7]
        assert [e.id for e in session.upcoming_events()] == [7, 8]
        assert session.stats().court_events == 1

    def test_month_buckets_use_selected_month(self, session):
        """選択日の月の全日分のバケットを返す"""
        # Arrange
        session.refresh()

        # Act
        buckets = session.month_buckets()

        # Assert
        assert len(buckets) == 31
        assert [e.id for e in buckets[date(2026, 1, 12)]] == [8]

    def test_default_selected_date_is_today(self, mock_store):
        """選択日の初期値は今日、表示モードは月"""
        session = CalendarSession(mock_store, clock=lambda: datetime(2026, 3, 1, 8, 0))
        assert session.selected_date == date(2026, 3, 1)
        assert session.view_mode == ViewMode.MONTH
