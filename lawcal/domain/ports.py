"""Ports - 外部サービスのインターフェース定義（ABC）

各Port（抽象基底クラス）は外部サービスとの契約を定義します。
実装クラス（Adapter）はこれらのABCを継承し、全ての抽象メソッドを実装する必要があります。
ABCなので、実装漏れはインスタンス化時に即座に検出されます。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from lawcal.domain.models import (
    CaseSummary,
    CreateEventData,
    Event,
    UpdateEventData,
)


class CredentialProvider(ABC):
    """認証トークンの取得（セッション保存先から読む）"""

    @abstractmethod
    def current_token(self) -> str | None:
        """現在のBearerトークン。未ログインの場合はNoneを返す"""
        pass


class EventStore(ABC):
    """イベントの永続化ストア（REST API等）"""

    @abstractmethod
    def list_events(self, params: dict[str, str]) -> list[Event]:
        """クエリパラメータに一致するイベント一覧を取得"""
        pass

    @abstractmethod
    def get_event(self, event_id: int) -> Event:
        """イベントを1件取得"""
        pass

    @abstractmethod
    def list_case_events(self, case_id: int) -> list[Event]:
        """案件に紐づくイベント一覧を取得"""
        pass

    @abstractmethod
    def create_event(self, data: CreateEventData) -> Event:
        """イベントを作成。ストアが採番したEventを返す"""
        pass

    @abstractmethod
    def update_event(self, event_id: int, data: UpdateEventData) -> Event:
        """イベントを更新（変更可能フィールドを全て送信）"""
        pass

    @abstractmethod
    def delete_event(self, event_id: int) -> None:
        """イベントを削除"""
        pass

    @abstractmethod
    def send_reminder(self, event_id: int) -> None:
        """サーバー側でリマインダーを送信させる"""
        pass


class CaseDirectory(ABC):
    """案件一覧の参照（案件選択・表示用）"""

    @abstractmethod
    def list_cases(self) -> list[CaseSummary]:
        """案件の概要一覧を取得"""
        pass
