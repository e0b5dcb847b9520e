"""レポートのHTML/テキスト出力モジュール。"""

from typing import List, Optional
from html import escape
import re
import logging

from ..models.category import DisplayCategory, DisplayIssue
from ..models.finding import Finding

logger = logging.getLogger(__name__)

_CODE_SPAN = re.compile(r"`([^`]+)`")


def format_message(message: str) -> str:
    """メッセージをHTMLエスケープし、バッククォートをpre/codeタグに変換する。

    Args:
        message: 指摘メッセージ

    Returns:
        HTML断片
    """
    return _CODE_SPAN.sub(r"<pre><code>\1</code></pre>", escape(message or ""))


class HtmlRenderer:
    """Plugin Checkの結果をHTMLに変換する。"""

    DOCUMENT_TEMPLATE = (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n<meta charset=\"utf-8\">\n<title>{title}</title>\n</head>\n"
        "<body>\n{body}</body>\n</html>\n"
    )

    def render_simple(self, title: str, findings: List[Finding]) -> str:
        """全指摘を並べたレポートを生成する。

        重大度に関係なく全ての指摘を出力する。

        Args:
            title: レポートタイトル（空文字の場合は見出しなし）
            findings: 指摘のリスト

        Returns:
            HTML文字列
        """
        parts = self._heading(title)

        for finding in findings:
            parts.append(f"<strong>{escape(finding.file)}</strong><br><br>\n")
            line = f"<strong>{escape(finding.severity)}: {escape(finding.code)}</strong>"
            if finding.has_location:
                line += f" - Line {finding.line}, Column {finding.column}"
            parts.append(line + "\n<br><br>\n")
            parts.append(format_message(finding.message))
            if finding.docs:
                parts.append(f" {self._learn_more(finding.docs)}")
            parts.append("\n<br><br>\n\n")

        logger.debug(f"Rendered {len(findings)} findings as HTML")
        return self._document(title, parts)

    def render_grouped(self, title: str, categories: List[DisplayCategory]) -> str:
        """カテゴリ別のレポートを生成する。

        Args:
            title: レポートタイトル（空文字の場合は見出しなし）
            categories: Presenterで整形済みのカテゴリ

        Returns:
            HTML文字列
        """
        parts = self._heading(title)

        for category in categories:
            parts.append(f"<strong>## {escape(category.title)}</strong>\n<br><br>\n\n")
            for issue in category.issues:
                parts.extend(self._grouped_issue(issue))
            parts.append("<br><br>\n")

        logger.debug(f"Rendered {len(categories)} categories as HTML")
        return self._document(title, parts)

    def _grouped_issue(self, issue: DisplayIssue) -> List[str]:
        parts = [
            f"<strong>{issue.type_label}: {escape(issue.code)}</strong><br><br>\n"
        ]

        if issue.is_single_location:
            location = issue.unique_locations[0]
            parts.append(f"<code>{escape(str(location))}</code> - ")

        parts.append(format_message(issue.message))
        if issue.docs and issue.is_single_location:
            parts.append(f" {self._learn_more(issue.docs)}")
        parts.append("\n<br><br>\n")

        if issue.total_locations > 1:
            files_output = "".join(
                escape(str(location)) + "\n"
                for location in issue.displayed_locations
            )
            parts.append(f"<pre><code>{files_output}</code></pre>\n")
            if issue.has_more_than_limit:
                parts.append(
                    f"… out of a total of {issue.total_locations} incidences.<br><br>\n"
                )
            if issue.docs:
                parts.append(f"{self._learn_more(issue.docs)}<br><br>\n")

        return parts

    @staticmethod
    def _heading(title: str) -> List[str]:
        if not title:
            return []
        return [f"<h2>{escape(title)}</h2>\n<br><br>\n\n"]

    @staticmethod
    def _learn_more(url: str) -> str:
        return f'<a href="{escape(url, quote=True)}" target="_blank">Learn more</a>'

    def _document(self, title: str, parts: List[str]) -> str:
        return self.DOCUMENT_TEMPLATE.format(title=escape(title or ""), body="".join(parts))


class TextRenderer:
    """Plugin Checkの結果をプレーンテキストに変換する。"""

    def render_simple(self, title: str, findings: List[Finding]) -> str:
        lines = self._heading(title)

        for finding in findings:
            location = f" - Line {finding.line}, Column {finding.column}" if finding.has_location else ""
            lines.append(finding.file)
            lines.append(f"{finding.severity}: {finding.code}{location}")
            lines.append(finding.message + self._docs_suffix(finding.docs))
            lines.append("")

        return "\n".join(lines)

    def render_grouped(self, title: str, categories: List[DisplayCategory]) -> str:
        lines = self._heading(title)

        for category in categories:
            lines.append(f"## {category.title}")
            lines.append("")
            for issue in category.issues:
                lines.append(f"{issue.type_label}: {issue.code}")
                if issue.is_single_location:
                    label = str(issue.unique_locations[0])
                    lines.append(f"{label} - {issue.message}{self._docs_suffix(issue.docs)}")
                else:
                    lines.append(issue.message + self._docs_suffix(issue.docs))
                    lines.extend(f"  {loc}" for loc in issue.displayed_locations)
                    if issue.has_more_than_limit:
                        lines.append(f"  … out of a total of {issue.total_locations} incidences.")
                lines.append("")

        return "\n".join(lines)

    @staticmethod
    def _heading(title: str) -> List[str]:
        if not title:
            return []
        return [title, "=" * len(title), ""]

    @staticmethod
    def _docs_suffix(docs: Optional[str]) -> str:
        return f" ({docs})" if docs else ""
