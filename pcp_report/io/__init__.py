"""入出力モジュール。"""

from .rules_loader import RulesLoader, RulesFileError
from .findings_reader import FindingsReader
from .plugin_check import PluginCheckRunner, PluginCheckError
from .report_renderer import HtmlRenderer, TextRenderer, format_message
from .excel_writer import ExcelWriter
from .file_utils import create_file, ReportWriteError

__all__ = [
    "RulesLoader",
    "RulesFileError",
    "FindingsReader",
    "PluginCheckRunner",
    "PluginCheckError",
    "HtmlRenderer",
    "TextRenderer",
    "format_message",
    "ExcelWriter",
    "create_file",
    "ReportWriteError",
]
