"""EventForm - イベント作成/編集ダイアログの状態機械

状態:
    CLOSED   ─ open_create() ─→ CREATING(draft: CreateEventData)
    CLOSED   ─ open_edit()   ─→ EDITING(draft: Event)
    CREATING ─ submit()      ─→ CLOSED（create → 一覧の先頭に追加）
    EDITING  ─ submit()      ─→ CLOSED（update → idで置き換え、詳細表示を閉じる）
    いずれか ─ cancel()      ─→ CLOSED（下書きを破棄、副作用なし）

送信に失敗した場合はダイアログを開いたまま下書きを保持する（自動リトライなし）。
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from lawcal.domain.errors import LawCalError, ValidationFailed
from lawcal.domain.models import CreateEventData, Event, UpdateEventData
from lawcal.services.calendar_session import CalendarSession

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)

_CREATE_FIELDS = frozenset(f.name for f in dataclasses.fields(CreateEventData))
_EDIT_FIELDS = frozenset(f.name for f in dataclasses.fields(UpdateEventData))


class FormMode(Enum):
    CLOSED = "closed"
    CREATING = "creating"
    EDITING = "editing"


def new_draft(selected: date | datetime) -> CreateEventData:
    """選択日時から作成用の下書きを作る（終了は開始の1時間後）"""
    if isinstance(selected, datetime):
        start = selected.replace(second=0, microsecond=0)
    else:
        start = datetime.combine(selected, time.min)
    return CreateEventData(
        title="",
        case_id=0,
        start_time=start,
        end_time=start + DEFAULT_DURATION,
    )


def missing_required(draft: CreateEventData) -> list[str]:
    """作成時の必須項目（タイトル・案件）のうち未入力のもの"""
    missing = []
    if not draft.title:
        missing.append("title")
    if not draft.case_id:
        missing.append("case_id")
    return missing


class EventForm:
    """
    イベント作成/編集ダイアログ。

    client_invited=False かつ client_confirmed=True の組み合わせは
    検証せずそのまま送る。
    """

    def __init__(self, session: CalendarSession) -> None:
        self._session = session
        self.mode = FormMode.CLOSED
        self.draft: CreateEventData | Event | None = None
        self.submitting = False
        self.last_error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.mode != FormMode.CLOSED

    def open_create(self, selected: date | datetime | None = None) -> CreateEventData:
        draft = new_draft(selected if selected is not None else self._session.selected_date)
        self.mode = FormMode.CREATING
        self.draft = draft
        self.last_error = None
        return draft

    def open_edit(self, event: Event) -> Event:
        # frozen dataclass なので複製せずそのまま保持しても元の一覧は変わらない
        self.mode = FormMode.EDITING
        self.draft = event
        self.last_error = None
        return event

    def set_field(self, name: str, value: Any) -> CreateEventData | Event:
        """
        下書きのフィールドを1つ変更する（下書き自体を置き換える）。

        Raises:
            RuntimeError: ダイアログが閉じている場合
            ValueError: 現在のモードで変更できないフィールドの場合
        """
        if self.draft is None:
            raise RuntimeError("No event draft is open")

        allowed = _CREATE_FIELDS if self.mode == FormMode.CREATING else _EDIT_FIELDS
        if name not in allowed:
            raise ValueError(f"Field cannot be edited: {name}")

        self.draft = dataclasses.replace(self.draft, **{name: value})
        return self.draft

    def cancel(self) -> None:
        """下書きを破棄して閉じる。送信中でも閉じられる（送信自体は取り消さない）"""
        self._close()

    def submit(self) -> Event | None:
        """
        下書きを送信する。

        Returns:
            Event: 作成/更新されたイベント。送信中の再送信は無視して None

        Raises:
            ValidationFailed: 必須項目が未入力（ストアは呼ばない）
            LawCalError: ストアでの作成/更新に失敗（ダイアログと下書きは残す）
        """
        if self.draft is None:
            raise RuntimeError("No event draft is open")
        if self.submitting:
            logger.warning("Submission already in progress, ignoring")
            return None

        if self.mode == FormMode.CREATING:
            return self._submit_create(self.draft)
        return self._submit_edit(self.draft)

    def _submit_create(self, draft: CreateEventData) -> Event:
        missing = missing_required(draft)
        if missing:
            error = ValidationFailed(missing, "Title and Case are required")
            self.last_error = str(error)
            raise error

        created = self._call_store(lambda: self._session.store.create_event(draft))
        self._session.add_created(created)
        self._close()
        return created

    def _submit_edit(self, draft: Event) -> Event:
        data = UpdateEventData.from_event(draft)
        updated = self._call_store(
            lambda: self._session.store.update_event(draft.id, data)
        )
        self._session.replace_event(updated)
        self._session.close_detail()
        self._close()
        return updated

    def _call_store(self, call: Callable[[], Event]) -> Event:
        self.submitting = True
        try:
            return call()
        except LawCalError as e:
            logger.exception("Failed to save event")
            self.last_error = str(e)
            raise
        finally:
            self.submitting = False

    def _close(self) -> None:
        self.mode = FormMode.CLOSED
        self.draft = None
        self.last_error = None
