"""レポートファイルの書き込みモジュール。"""

from typing import Union
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class ReportWriteError(Exception):
    """レポートファイルの書き込みエラー。"""
    pass


def create_file(
    file_path: Union[str, Path],
    content: Union[str, bytes] = "",
    overwrite: bool = True
) -> Path:
    """ファイルに内容を書き込む。

    Args:
        file_path: 書き込むファイルのパス
        content: 書き込む内容（文字列はUTF-8で書き込む）
        overwrite: 既存ファイルを上書きするかどうか

    Returns:
        書き込んだファイルのパス

    Raises:
        ReportWriteError: 上書きが無効で既にファイルが存在する場合、
            またはディレクトリ作成・書き込みに失敗した場合
    """
    path = Path(file_path)

    if not overwrite and path.exists():
        raise ReportWriteError(f"File already exists and overwrite is disabled: {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReportWriteError(f"Could not create directory: {path.parent}: {e}") from e

    try:
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"Could not write file: {path}: {e}") from e

    logger.debug(f"Wrote {path}")
    return path
