"""wp plugin checkコマンドの実行モジュール。"""

from typing import Dict, List, Optional, Union
import subprocess
import logging

logger = logging.getLogger(__name__)

# 値を取らないフラグ
FLAG_OPTIONS = ("ignore-warnings", "ignore-errors", "include-experimental")

# 常にこの値で上書きする出力オプション
OUTPUT_OPTIONS = {
    "format": "strict-json",
    "fields": "file,line,column,type,code,message,docs",
}

NO_ERRORS_MESSAGE = "Checks complete. No errors found."


class PluginCheckError(Exception):
    """wp plugin checkの実行エラー。"""

    def __init__(self, message: str, stderr: str = "", return_code: Optional[int] = None):
        super().__init__(message)
        self.stderr = stderr
        self.return_code = return_code


class PluginCheckRunner:
    """WP-CLIのplugin checkを実行してstrict-json出力を取得する。"""

    def __init__(
        self,
        wp_command: str = "wp",
        timeout: Optional[float] = None
    ):
        """ランナーを初期化する。

        Args:
            wp_command: WP-CLIの実行ファイル
            timeout: タイムアウト秒数（Noneの場合は無制限）
        """
        self.wp_command = wp_command
        self.timeout = timeout

    def build_command(
        self,
        plugin: str,
        options: Optional[Dict[str, Union[str, bool]]] = None
    ) -> List[str]:
        """コマンド引数リストを構築する。

        Args:
            plugin: チェック対象のプラグイン（スラッグ、パス、URL）
            options: 追加オプション（キーは先頭の--なし）

        Returns:
            subprocessに渡す引数リスト
        """
        merged: Dict[str, Union[str, bool]] = {}
        for key, value in (options or {}).items():
            if value is None or value is False:
                continue
            merged[key] = value
        # 出力形式は呼び出し側の指定より優先
        merged.update(OUTPUT_OPTIONS)

        command = [self.wp_command, "plugin", "check", plugin]
        for key, value in merged.items():
            if key in FLAG_OPTIONS or value is True:
                command.append(f"--{key}")
            else:
                command.append(f"--{key}={value}")
        return command

    def run(
        self,
        plugin: str,
        options: Optional[Dict[str, Union[str, bool]]] = None
    ) -> str:
        """plugin checkを実行する。

        Args:
            plugin: チェック対象のプラグイン
            options: 追加オプション

        Returns:
            標準出力

        Raises:
            PluginCheckError: 実行に失敗した場合
        """
        command = self.build_command(plugin, options)
        logger.info(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False
            )
        except FileNotFoundError as e:
            raise PluginCheckError(f"WP-CLI not found: {self.wp_command}") from e
        except subprocess.TimeoutExpired as e:
            raise PluginCheckError(
                f"Plugin check timed out after {self.timeout}s"
            ) from e

        if result.returncode == 1:
            raise PluginCheckError(
                result.stderr.strip() or "Plugin check failed",
                stderr=result.stderr,
                return_code=result.returncode
            )

        logger.debug(f"Plugin check exited with code {result.returncode}")
        return result.stdout

    @staticmethod
    def has_no_issues(stdout: Optional[str]) -> bool:
        """出力が「指摘なし」を表すかどうかを判定する。"""
        if stdout is None:
            return True
        text = stdout.strip()
        return text in ("", "[]") or NO_ERRORS_MESSAGE in text
