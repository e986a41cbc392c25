"""設定管理 - 環境変数の型安全な読み込み"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from lawcal.domain.errors import ConfigError

DEFAULT_SESSION_FILE = os.path.join("~", ".lawcal", "session.json")


@dataclass(frozen=True)
class AppConfig:
    """アプリケーション設定"""
    api_url: str
    token: str = ""
    session_file: str = DEFAULT_SESSION_FILE
    http_timeout: float | None = None  # None = トランスポート任せ（タイムアウトなし）

    @classmethod
    def from_env(cls) -> "AppConfig":
        """環境変数から設定を読み込む"""
        load_dotenv()

        api_url = os.getenv("LAWCAL_API_URL")
        if not api_url:
            raise ConfigError("LAWCAL_API_URL is not set in environment")

        raw_timeout = os.getenv("LAWCAL_HTTP_TIMEOUT", "")
        http_timeout = None
        if raw_timeout:
            try:
                http_timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(
                    f"LAWCAL_HTTP_TIMEOUT must be a number: {raw_timeout!r}"
                ) from e

        return cls(
            api_url=api_url.rstrip("/"),
            token=os.getenv("LAWCAL_TOKEN", ""),
            session_file=os.getenv("LAWCAL_SESSION_FILE", DEFAULT_SESSION_FILE),
            http_timeout=http_timeout,
        )
