"""Plugin Checkレポート生成ツールのメインエントリーポイント。"""

import argparse
import sys
import webbrowser
from pathlib import Path
from typing import Dict, List, Optional, Union
from dataclasses import dataclass
import logging

from .config import Config, OUTPUT_FORMATS
from .grouping.aggregator import Aggregator
from .grouping.presenter import Presenter
from .grouping.rule_set import RuleConfigError
from .io.excel_writer import ExcelWriter
from .io.file_utils import create_file, ReportWriteError
from .io.findings_reader import FindingsReader
from .io.plugin_check import PluginCheckRunner, PluginCheckError
from .io.report_renderer import HtmlRenderer, TextRenderer
from .io.rules_loader import RulesLoader
from .models.finding import Finding
from .utils.logger import setup_logging
from .utils.slug import report_file_name

logger = logging.getLogger(__name__)

# wp plugin checkにそのまま渡すオプション
CHECK_VALUE_OPTIONS = (
    "checks",
    "exclude-checks",
    "ignore-codes",
    "categories",
    "exclude-directories",
    "exclude-files",
    "severity",
    "error-severity",
    "warning-severity",
)
CHECK_FLAG_OPTIONS = ("ignore-warnings", "ignore-errors", "include-experimental")


@dataclass
class ReportStats:
    """レポート生成の統計情報。"""
    findings: int = 0
    categories: int = 0
    grouped_issues: int = 0


class ReportGenerator:
    """Plugin Checkの結果からレポートファイルを生成する。"""

    def __init__(self, config: Config):
        """レポート生成器を初期化する。

        Args:
            config: アプリケーション設定
        """
        self.config = config
        self.stats = ReportStats()
        self.reader = FindingsReader()
        self.runner = PluginCheckRunner(
            wp_command=config.wp_command,
            timeout=config.check_timeout
        )

    def collect_findings(
        self,
        plugin: str,
        check_options: Optional[Dict[str, Union[str, bool]]] = None,
        input_file: Optional[str] = None
    ) -> List[Finding]:
        """指摘を取得する。

        Args:
            plugin: チェック対象のプラグイン
            check_options: wp plugin checkに渡すオプション
            input_file: 保存済みの結果ファイル（指定時はplugin checkを実行しない）

        Returns:
            Findingのリスト
        """
        if input_file:
            return self.reader.read(input_file)

        stdout = self.runner.run(plugin, check_options)
        if self.runner.has_no_issues(stdout):
            return []
        return self.reader.parse_json(stdout)

    def render(self, findings: List[Finding], grouped: bool) -> Union[str, bytes]:
        """指摘をレポート内容に変換する。

        Args:
            findings: 指摘のリスト
            grouped: カテゴリ別にまとめるかどうか

        Returns:
            設定された出力形式のレポート内容
        """
        renderer = self._renderer()
        title = self.config.report_title

        if not grouped:
            return renderer.render_simple(title, findings)

        rule_set = RulesLoader().load(self.config.rules_file)
        categories = Aggregator(rule_set).aggregate(findings)
        display = Presenter(self.config.display_limit).present_categories(categories)

        self.stats.categories = len(display)
        self.stats.grouped_issues = sum(len(c.issues) for c in display)
        return renderer.render_grouped(title, display)

    def _renderer(self):
        if self.config.output_format == "xlsx":
            return ExcelWriter()
        if self.config.output_format == "text":
            return TextRenderer()
        return HtmlRenderer()

    def generate(
        self,
        plugin: str,
        grouped: bool = False,
        check_options: Optional[Dict[str, Union[str, bool]]] = None,
        input_file: Optional[str] = None,
        slug: Optional[str] = None
    ) -> Optional[Path]:
        """レポートを生成してファイルに書き込む。

        Args:
            plugin: チェック対象のプラグイン
            grouped: カテゴリ別レポートにするかどうか
            check_options: wp plugin checkに渡すオプション
            input_file: 保存済みの結果ファイル
            slug: 出力ファイル名（省略時はpluginから生成）

        Returns:
            レポートファイルのパス。指摘がない場合はNone
        """
        findings = self.collect_findings(plugin, check_options, input_file)
        self.stats.findings = len(findings)

        if not findings:
            logger.info("No errors or warnings.")
            return None

        content = self.render(findings, grouped)

        file_name = slug or report_file_name(plugin) or "report"
        report_file = Path(self.config.reports_dir) / f"{file_name}{self.config.report_extension}"
        create_file(report_file, content)

        self._log_statistics(grouped)
        return report_file

    def _log_statistics(self, grouped: bool) -> None:
        logger.debug(f"Findings: {self.stats.findings}")
        if grouped:
            logger.debug(f"Categories: {self.stats.categories}")
            logger.debug(f"Grouped issues: {self.stats.grouped_issues}")


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数パーサーを構築する。"""
    parser = argparse.ArgumentParser(
        prog="pcp-report",
        description="Generates reports for plugin check command results."
    )
    parser.add_argument("plugin", nargs="?", help="The plugin to check.")
    parser.add_argument("--slug", help="Slug to override the default.")
    parser.add_argument(
        "--report-title",
        help="Custom title for the report. Use empty string to remove title."
    )
    for option in CHECK_VALUE_OPTIONS:
        parser.add_argument(f"--{option}", help=f"Passed to plugin check as --{option}.")
    for option in CHECK_FLAG_OPTIONS:
        parser.add_argument(
            f"--{option}",
            action="store_true",
            help=f"Passed to plugin check as --{option}."
        )
    parser.add_argument(
        "--grouped",
        action="store_true",
        help="Display report in grouped format."
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open report in default browser."
    )
    parser.add_argument(
        "--porcelain",
        action="store_true",
        help="Output just the report file path."
    )
    parser.add_argument(
        "--group-config",
        help="Path to custom group configuration JSON/YAML file."
    )
    parser.add_argument(
        "-i", "--input",
        help="Read plugin check results from a JSON/CSV/XLSX file instead of running wp."
    )
    parser.add_argument(
        "-f", "--format",
        choices=OUTPUT_FORMATS,
        help="Report format (default: html)."
    )
    parser.add_argument(
        "-c", "--config",
        help="Configuration file path (YAML)."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging."
    )
    parser.add_argument(
        "--init-config",
        metavar="PATH",
        help="Write a configuration file with default values and exit."
    )
    return parser


def collect_check_options(args: argparse.Namespace) -> Dict[str, Union[str, bool]]:
    """引数からwp plugin checkに渡すオプションを取り出す。"""
    options: Dict[str, Union[str, bool]] = {}
    for option in CHECK_VALUE_OPTIONS:
        value = getattr(args, option.replace("-", "_"))
        if value is not None:
            options[option] = value
    for option in CHECK_FLAG_OPTIONS:
        if getattr(args, option.replace("-", "_")):
            options[option] = True
    return options


def load_config(args: argparse.Namespace) -> Config:
    """設定ファイルとコマンドライン引数から設定を作成する。"""
    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()
        config.apply_env()

    if args.report_title is not None:
        config.report_title = args.report_title
    if args.group_config:
        config.rules_file = args.group_config
    if args.format:
        config.output_format = args.format
    if args.verbose:
        config.log_level = "DEBUG"
    elif args.porcelain:
        config.log_level = "WARNING"
    return config


def open_in_browser(path: Path, output_format: str = "html") -> None:
    """HTMLレポートを既定のブラウザで開く。"""
    if output_format != "html":
        logger.warning(f"--open is only supported for HTML reports: {path}")
        return
    if not webbrowser.open(path.resolve().as_uri()):
        logger.warning(f"Could not open browser for {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """メインエントリーポイント。

    Returns:
        終了コード
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # --init-configモードを処理
    if args.init_config:
        return _init_config(args.init_config)

    # 通常モードではpluginが必要
    if not args.plugin:
        parser.error("the following arguments are required: plugin")

    if args.config and not Path(args.config).exists():
        print(f"Error: 設定ファイルが見つかりません: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: 設定ファイルを読み込めません: {e}", file=sys.stderr)
        return 1

    errors = config.validate()
    if errors:
        setup_logging()
        for error in errors:
            logger.error(f"Configuration error: {error}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        format_string=config.log_format
    )

    if args.input and not Path(args.input).exists():
        logger.error(f"入力ファイルが見つかりません: {args.input}")
        return 1

    generator = ReportGenerator(config)
    try:
        report_file = generator.generate(
            args.plugin,
            grouped=args.grouped,
            check_options=collect_check_options(args),
            input_file=args.input,
            slug=args.slug
        )
    except (PluginCheckError, RuleConfigError, ReportWriteError) as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid plugin check results: {e}")
        return 1

    if report_file is None:
        return 0

    if args.porcelain:
        print(report_file)
        return 0

    if args.open:
        open_in_browser(report_file, config.output_format)

    logger.info(f"Report file: {report_file}")
    logger.info("PCP report generated successfully.")
    return 0


def _init_config(output_path: str) -> int:
    """既定値の設定ファイルを生成する。

    Args:
        output_path: 出力先パス

    Returns:
        終了コード
    """
    setup_logging(level="INFO")

    if Path(output_path).exists():
        print(f"Error: 既にファイルが存在します: {output_path}", file=sys.stderr)
        return 1

    try:
        Config().save_yaml(output_path)
    except OSError as e:
        print(f"Error: 設定ファイルを書き込めません: {e}", file=sys.stderr)
        return 1

    print(f"設定ファイルを生成しました: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
