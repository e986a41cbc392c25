"""ドメイン固有の例外クラス"""


class LawCalError(Exception):
    """lawcal の基底例外"""

    pass


class ConfigError(LawCalError):
    """設定読み込みエラー（必須の環境変数が未設定等）"""

    pass


class AuthMissing(LawCalError):
    """認証トークンが見つからない（リクエスト送信前に中断）"""

    def __init__(self, message: str = "No authentication token found") -> None:
        super().__init__(message)


class ValidationFailed(LawCalError):
    """クライアント側の必須項目チェックエラー"""

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(message or f"Required fields missing: {', '.join(fields)}")


class RequestFailed(LawCalError):
    """2xx以外のHTTPレスポンス"""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{message} (status: {status})")


class NetworkError(LawCalError):
    """通信レベルの失敗（レスポンスなし）"""

    pass
