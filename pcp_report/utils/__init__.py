"""ユーティリティモジュール。"""

from .logger import setup_logging
from .slug import report_file_name, sanitize_file_name

__all__ = ["setup_logging", "report_file_name", "sanitize_file_name"]
