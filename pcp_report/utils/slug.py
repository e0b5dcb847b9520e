"""レポートファイル名の生成モジュール。"""

from urllib.parse import urlparse
from pathlib import PurePosixPath
import re

_VERSIONED_ZIP = re.compile(r"\.\d+(\.\d+)*\.zip$")
_WPORGAPI_PREFIX = re.compile(r"^\d+_\d+-\d+-\d+_")
_ZIP_SUFFIX = re.compile(r"\.zip$")

# ファイル名に使えない文字
_SPECIAL_CHARS = re.compile(r"[?\[\]/\\=<>:;,'\"&$#*()|~`!{}%+’«»”“\x00-\x1f]")


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def sanitize_file_name(name: str) -> str:
    """ファイル名として安全な文字列に変換する。

    特殊文字を取り除き、空白をハイフンにまとめ、先頭末尾の
    ピリオド・ハイフン・アンダースコアを取り除く。
    """
    name = _SPECIAL_CHARS.sub("", name)
    name = re.sub(r"[\s-]+", "-", name)
    return name.strip(".-_")


def report_file_name(plugin: str) -> str:
    """プラグインのスラッグ、パス、URLからレポートのファイル名（拡張子なし）を生成する。

    Args:
        plugin: wp plugin checkに渡したプラグイン指定

    Returns:
        小文字化・サニタイズ済みのファイル名
    """
    slug = plugin

    if _is_url(slug):
        path = urlparse(slug).path
        filename = PurePosixPath(path).name if path else ""

        if filename:
            if "downloads.wordpress.org/plugin/" in slug:
                slug = _VERSIONED_ZIP.sub("", filename)
                slug = _ZIP_SUFFIX.sub("", slug)
            elif "#wporgapi" in slug:
                slug = _WPORGAPI_PREFIX.sub("", filename)
                slug = _ZIP_SUFFIX.sub("", slug)
            elif ".zip" in slug:
                slug = _ZIP_SUFFIX.sub("", filename)
    elif "/" in slug:
        slug = PurePosixPath(slug.rstrip("/")).name

    return sanitize_file_name(slug.lower())
