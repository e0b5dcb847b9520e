"""設定管理モジュール。"""

from dataclasses import dataclass, fields
from typing import List, Dict, Optional, Any
from pathlib import Path
import os
import logging

import yaml

from .utils.logger import LOG_LEVELS, is_valid_level

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("html", "text", "xlsx")

# 出力形式ごとの拡張子
FORMAT_EXTENSIONS = {
    "html": ".html",
    "text": ".txt",
    "xlsx": ".xlsx",
}

# 文字列（またはNone）であるべき設定項目
STRING_FIELDS = (
    "rules_file", "report_title", "reports_dir", "wp_command", "log_file", "log_format"
)


def default_reports_dir() -> str:
    """WP-CLIのキャッシュディレクトリ配下のレポート出力先を返す。"""
    cache_dir = os.getenv("WP_CLI_CACHE_DIR") or str(Path.home() / ".wp-cli" / "cache")
    return str(Path(cache_dir) / "pcp-report")


@dataclass
class Config:
    """アプリケーション設定。"""

    # グループ設定ファイル（Noneの場合は同梱のgroups.json）
    rules_file: Optional[str] = None

    # レポート設定
    report_title: str = "Plugin Check Report"
    display_limit: int = 3  # 複数位置の指摘で表示する位置の最大数
    reports_dir: str = ""
    output_format: str = "html"

    # WP-CLI設定
    wp_command: str = "wp"
    check_timeout: Optional[float] = None  # plugin checkのタイムアウト（秒）

    # ロギング設定
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: Optional[str] = None  # 省略時は標準フォーマット

    def __post_init__(self):
        if not self.reports_dir:
            self.reports_dir = default_reports_dir()

    @classmethod
    def from_yaml(cls, file_path: str) -> "Config":
        """YAMLファイルから設定を読み込む。

        Args:
            file_path: YAML設定ファイルのパス

        Returns:
            Configインスタンス
        """
        with open(file_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"YAMLの解析に失敗しました: {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"設定ファイルの形式が不正です: {file_path}")

        config = cls.from_dict(data)
        config.apply_env()

        logger.info(f"Configuration loaded from {file_path}")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """辞書から設定を作成する。

        Args:
            data: 設定辞書（未知のキーは無視）

        Returns:
            Configインスタンス
        """
        config = cls()

        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown configuration key ignored: {key}")

        if not config.reports_dir:
            config.reports_dir = default_reports_dir()
        return config

    def apply_env(self) -> None:
        """環境変数で設定を上書きする。"""
        self.reports_dir = os.getenv("PCP_REPORT_DIR", self.reports_dir)
        self.wp_command = os.getenv("PCP_WP_COMMAND", self.wp_command)

    def validate(self) -> List[str]:
        """設定を検証する。

        Returns:
            検証エラーのリスト（有効な場合は空）
        """
        errors = []

        if self.output_format not in OUTPUT_FORMATS:
            errors.append(
                f"output_formatは{', '.join(OUTPUT_FORMATS)}のいずれかです: {self.output_format}"
            )

        if (
            isinstance(self.display_limit, bool)
            or not isinstance(self.display_limit, int)
            or self.display_limit < 1
        ):
            errors.append(f"display_limitは1以上の整数です: {self.display_limit}")

        if self.check_timeout is not None and (
            isinstance(self.check_timeout, bool)
            or not isinstance(self.check_timeout, (int, float))
            or self.check_timeout <= 0
        ):
            errors.append(f"check_timeoutは正の数です: {self.check_timeout!r}")

        if not is_valid_level(self.log_level):
            errors.append(
                f"log_levelは{', '.join(LOG_LEVELS)}のいずれかです: {self.log_level!r}"
            )

        for name in STRING_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                errors.append(f"{name}は文字列です: {value!r}")

        if isinstance(self.rules_file, str) and self.rules_file and not Path(self.rules_file).exists():
            errors.append(f"グループ設定ファイルが存在しません: {self.rules_file}")

        if not self.wp_command:
            errors.append("wp_commandは必須です")

        return errors

    @property
    def report_extension(self) -> str:
        return FORMAT_EXTENSIONS.get(self.output_format, ".html")

    def to_dict(self) -> Dict[str, Any]:
        """設定を辞書に変換する。

        Returns:
            辞書形式の設定
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def save_yaml(self, file_path: str) -> None:
        """設定をYAMLファイルに保存。

        Args:
            file_path: 保存先パス
        """
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = {key: value for key, value in self.to_dict().items() if value is not None}

        with open(file_path, "w", encoding="utf-8") as f:
            yaml.dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False
            )

        logger.info(f"Configuration saved to {file_path}")
