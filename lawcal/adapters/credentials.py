"""認証トークンの取得

CredentialProvider ABCの実装群。
ストアクライアントは環境やファイルを直接読まず、コンストラクタで注入された
プロバイダから毎回トークンを取得する（ログアウト後の呼び出しを検出するため）。
"""

from __future__ import annotations

import json
import logging
import os

from lawcal.domain.ports import CredentialProvider

logger = logging.getLogger(__name__)


class StaticCredentialProvider(CredentialProvider):
    """固定トークン（環境変数 LAWCAL_TOKEN やテスト用）"""

    def __init__(self, token: str | None) -> None:
        self._token = token or None

    def current_token(self) -> str | None:
        return self._token


class SessionFileCredentialProvider(CredentialProvider):
    """
    セッションファイル（JSON）からトークンを読む。

    ファイル形式:
        {"token": "<bearer token>", ...}

    ファイルがない・壊れている・tokenキーがない場合はNone（未ログイン扱い）。
    """

    def __init__(self, path: str) -> None:
        self._path = os.path.expanduser(path)

    def current_token(self) -> str | None:
        if not os.path.exists(self._path):
            return None
        try:
            with open(self._path, encoding="utf-8") as f:
                session = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unreadable session file %s: %s", self._path, e)
            return None

        if not isinstance(session, dict):
            return None
        token = session.get("token")
        return token if isinstance(token, str) and token else None


class ChainedCredentialProvider(CredentialProvider):
    """複数のプロバイダを順に試し、最初に見つかったトークンを返す"""

    def __init__(self, *providers: CredentialProvider) -> None:
        self._providers = providers

    def current_token(self) -> str | None:
        for provider in self._providers:
            token = provider.current_token()
            if token:
                return token
        return None
