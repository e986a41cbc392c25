"""REST Event Store Adapter

EventStore / CaseDirectory ABC の httpx を使った実装。

エンドポイント:
  GET    /events?status=&event_type=&assigned_to_user_id=&search=&start_date=&end_date=
  GET    /events/{id}
  POST   /events
  PUT    /events/{id}
  DELETE /events/{id}
  POST   /events/{id}/send-reminder
  GET    /cases
  GET    /cases/{id}/events
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from lawcal.adapters.api_schemas import CasePayload, EventPayload
from lawcal.domain.errors import AuthMissing, NetworkError, RequestFailed
from lawcal.domain.models import CaseSummary, CreateEventData, Event, UpdateEventData
from lawcal.domain.ports import CaseDirectory, CredentialProvider, EventStore

logger = logging.getLogger(__name__)

_WIRE_DATETIME_FMT = "%Y-%m-%dT%H:%M:%S"


class RestEventStore(EventStore, CaseDirectory):
    """
    REST API をバックエンドとするイベントストア。

    - トークンは呼び出し毎に CredentialProvider から取得し、無ければ
      ネットワークに出る前に AuthMissing を送出する
    - 2xx 以外は RequestFailed、通信失敗は NetworkError に正規化する
    - リトライはしない（呼び出し元でエラーを表示する）
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            base_url: APIのベースURL 例: "https://example.com/api"
            credentials: Bearerトークンの取得元
            timeout: 秒数。None の場合はタイムアウトなし
            client: テスト用に差し替える httpx.Client
        """
        if not base_url:
            raise ValueError("base_url is required")

        self._credentials = credentials
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RestEventStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ─── EventStore ─────────────────────────────────────────────────────────

    def list_events(self, params: dict[str, str]) -> list[Event]:
        status, data = self._request("GET", "/events", params=params)
        events = self._parse_events(data, status)
        logger.info("Fetched %d events (params=%s)", len(events), params)
        return events

    def get_event(self, event_id: int) -> Event:
        status, data = self._request("GET", f"/events/{event_id}")
        return self._parse_event(data, status)

    def list_case_events(self, case_id: int) -> list[Event]:
        status, data = self._request("GET", f"/cases/{case_id}/events")
        return self._parse_events(data, status)

    def create_event(self, data: CreateEventData) -> Event:
        # 未指定（None）のフィールドは送らない
        body = {k: v for k, v in _to_wire(data).items() if v is not None}
        status, payload = self._request("POST", "/events", json=body)
        created = self._parse_event(payload, status)
        logger.info(
            "Created event: %s (ID: %s)",
            created.title,
            created.id,
            extra=_log_fields("create", created.id),
        )
        return created

    def update_event(self, event_id: int, data: UpdateEventData) -> Event:
        # 部分更新ではないので None も含めて全フィールドを送る
        body = _to_wire(data)
        status, payload = self._request("PUT", f"/events/{event_id}", json=body)
        updated = self._parse_event(payload, status)
        logger.info(
            "Updated event: %s (ID: %s)",
            updated.title,
            updated.id,
            extra=_log_fields("update", updated.id),
        )
        return updated

    def delete_event(self, event_id: int) -> None:
        self._request("DELETE", f"/events/{event_id}")
        logger.info("Deleted event ID: %s", event_id, extra=_log_fields("delete", event_id))

    def send_reminder(self, event_id: int) -> None:
        # レスポンスの {event: ...} は使わない
        self._request("POST", f"/events/{event_id}/send-reminder")
        logger.info(
            "Reminder sent for event ID: %s",
            event_id,
            extra=_log_fields("send_reminder", event_id),
        )

    # ─── CaseDirectory ──────────────────────────────────────────────────────

    def list_cases(self) -> list[CaseSummary]:
        status, data = self._request("GET", "/cases")
        if not isinstance(data, list):
            raise RequestFailed(status, "Server returned an unexpected case list")
        try:
            return [CasePayload.model_validate(item).to_domain() for item in data]
        except ValidationError as e:
            logger.error("Invalid case payload: %s", e)
            raise RequestFailed(status, "Server returned an unexpected case payload") from e

    # ─── internals ──────────────────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        token = self._credentials.current_token()
        if not token:
            raise AuthMissing()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> tuple[int, Any]:
        """
        リクエストを送信し、(ステータスコード, JSONボディ) を返す。ボディが空ならNone。

        Raises:
            AuthMissing: トークンがない場合（送信しない）
            NetworkError: 通信レベルの失敗
            RequestFailed: 2xx 以外、または不正なJSON
        """
        headers = self._headers()

        try:
            response = self._client.request(
                method, path, params=params or None, json=json, headers=headers
            )
        except httpx.TransportError as e:
            logger.error("Network error: %s %s - %s", method, path, e)
            raise NetworkError(str(e) or "Network error. Please try again.") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "Request failed: %s %s -> %d %s",
                method,
                path,
                response.status_code,
                message,
            )
            raise RequestFailed(response.status_code, message)

        if not response.content.strip():
            return response.status_code, None
        try:
            return response.status_code, response.json()
        except ValueError as e:
            raise RequestFailed(
                response.status_code,
                f"Server returned invalid JSON (status: {response.status_code})",
            ) from e

    @staticmethod
    def _parse_event(data: Any, status: int) -> Event:
        try:
            return EventPayload.model_validate(data).to_domain()
        except ValidationError as e:
            logger.error("Invalid event payload: %s", e)
            raise RequestFailed(status, "Server returned an unexpected event payload") from e

    @classmethod
    def _parse_events(cls, data: Any, status: int) -> list[Event]:
        if not isinstance(data, list):
            raise RequestFailed(status, "Server returned an unexpected event list")
        return [cls._parse_event(item, status) for item in data]


def _log_fields(operation: str, event_id: int) -> dict[str, Any]:
    """JsonLogFormatter がトップレベルに展開する構造化フィールド"""
    return {"extra_fields": {"operation": operation, "event_id": event_id}}


def _error_message(response: httpx.Response) -> str:
    """エラーレスポンスから表示用メッセージを取り出す

    優先順位: ボディの error → message → ステータスライン
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return response.reason_phrase or f"Request failed with status {response.status_code}"


def _to_wire(data: CreateEventData | UpdateEventData) -> dict[str, Any]:
    """dataclass を JSON ボディ用の dict に変換"""
    body: dict[str, Any] = {}
    for key, value in dataclasses.asdict(data).items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.strftime(_WIRE_DATETIME_FMT)
        body[key] = value
    return body
