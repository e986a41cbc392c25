"""ロギング設定モジュール

LOG_FORMAT=json の場合はJSON Lines形式、それ以外はテキスト形式でログを出力する。

使い方:
    from lawcal.logging_config import setup_logging
    setup_logging()

環境変数:
    LOG_LEVEL: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL) デフォルト: INFO
    LOG_FORMAT: "text" または "json" デフォルト: text
"""

import json
import logging
import os


class JsonLogFormatter(logging.Formatter):
    """1レコード1行のJSONフォーマッタ

    `severity` にはログレベル名をそのまま入れる。
    extra={"extra_fields": {...}} で渡した項目はトップレベルに展開される。
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging() -> None:
    """ログ設定を初期化する

    LOG_FORMAT=json ならJSONフォーマッタ、それ以外はテキスト形式を使用する。
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    use_json = os.getenv("LOG_FORMAT", "text").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # httpx はリクエスト毎に INFO を出すので抑制する
    logging.getLogger("httpx").setLevel(logging.WARNING)
