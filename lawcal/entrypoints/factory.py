"""Factory - 依存性注入の組み立て

認証情報・RESTストアを組み立て、CalendarSession を生成する。
"""

import logging

from lawcal.adapters.credentials import (
    ChainedCredentialProvider,
    SessionFileCredentialProvider,
    StaticCredentialProvider,
)
from lawcal.adapters.rest_event_store import RestEventStore
from lawcal.config import AppConfig
from lawcal.domain.ports import CredentialProvider
from lawcal.services.calendar_session import CalendarSession

logger = logging.getLogger(__name__)


def create_credentials(config: AppConfig) -> CredentialProvider:
    """環境変数のトークン → セッションファイルの順に探すプロバイダ"""
    return ChainedCredentialProvider(
        StaticCredentialProvider(config.token),
        SessionFileCredentialProvider(config.session_file),
    )


def create_event_store(config: AppConfig) -> RestEventStore:
    return RestEventStore(
        base_url=config.api_url,
        credentials=create_credentials(config),
        timeout=config.http_timeout,
    )


def create_session(config: AppConfig | None = None) -> CalendarSession:
    """
    CalendarSessionを生成（全依存を組み立て）。

    Args:
        config: アプリケーション設定（Noneの場合は環境変数から読み込み）

    Returns:
        CalendarSession: 一覧未取得のセッション

    Raises:
        ConfigError: 必須設定が不足している場合
    """
    if config is None:
        config = AppConfig.from_env()

    logger.info("Creating calendar session with api_url=%s", config.api_url)
    store = create_event_store(config)
    return CalendarSession(store=store, case_directory=store)
