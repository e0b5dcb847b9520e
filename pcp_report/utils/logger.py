"""ロギング設定モジュール。"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def is_valid_level(level) -> bool:
    """ログレベル名として使える値かどうか。"""
    return isinstance(level, str) and level.upper() in LOG_LEVELS


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """ルートロガーにコンソール・ファイル出力を設定する。

    コンソール出力は標準エラーに送る。標準出力は--porcelainの
    レポートパス専用。

    Args:
        level: ログレベル名（LOG_LEVELSのいずれか。不正な値はINFO）
        log_file: ログファイルのパス（省略可）
        format_string: ログのフォーマット（省略時はDEFAULT_FORMAT）
        stream: コンソール出力先（省略時は標準エラー）

    Returns:
        ルートロガー
    """
    log_level = getattr(logging, level.upper()) if is_valid_level(level) else logging.INFO
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    return root_logger
