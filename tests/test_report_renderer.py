"""レポート出力のテスト。"""

from io import BytesIO

from openpyxl import load_workbook

from pcp_report.grouping.presenter import Presenter
from pcp_report.io.excel_writer import ExcelWriter
from pcp_report.io.report_renderer import HtmlRenderer, TextRenderer, format_message
from pcp_report.models.category import Category, GroupedIssue
from pcp_report.models.finding import Finding, Location, Severity


def _categories(location_count=1, docs="https://example.com/docs"):
    issue = GroupedIssue(
        severity=Severity.ERROR,
        code="WordPress.Security.EscapeOutput.OutputNotEscaped",
        message="Use `esc_html()` here.",
        docs=docs,
        locations=[Location("hello.php", n, 1) for n in range(1, location_count + 1)],
    )
    return Presenter().present_categories([Category(id="security", title="Security", issues=[issue])])


class TestFormatMessage:
    """メッセージ整形のテスト。"""

    def test_escapes_html(self):
        """HTMLがエスケープされることのテスト。"""
        assert format_message("<script>") == "&lt;script&gt;"

    def test_backticks_become_code_blocks(self):
        """バッククォートがpre/codeタグになることのテスト。"""
        assert format_message("Use `a<b` now") == "Use <pre><code>a&lt;b</code></pre> now"

    def test_empty(self):
        """空メッセージのテスト。"""
        assert format_message("") == ""


class TestHtmlRendererGrouped:
    """グループ化HTMLレポートのテスト。"""

    def test_single_location(self):
        """位置が1件の場合のテスト。"""
        html = HtmlRenderer().render_grouped("My Report", _categories(1))
        assert "<h2>My Report</h2>" in html
        assert "<strong>## Security</strong>" in html
        assert "<strong>ERROR: WordPress.Security.EscapeOutput.OutputNotEscaped</strong>" in html
        assert "<code>hello.php:1</code> - " in html
        assert "<pre><code>esc_html()</code></pre>" in html
        assert 'href="https://example.com/docs"' in html
        assert "out of a total of" not in html

    def test_truncated_locations(self):
        """表示件数を超える場合のテスト。"""
        html = HtmlRenderer().render_grouped("Report", _categories(5))
        assert "hello.php:1\nhello.php:2\nhello.php:3\n" in html
        assert "hello.php:4" not in html
        assert "… out of a total of 5 incidences." in html

    def test_locations_within_limit(self):
        """表示件数以内の場合は省略表示がないことのテスト。"""
        html = HtmlRenderer().render_grouped("Report", _categories(3, docs=None))
        assert "hello.php:3" in html
        assert "out of a total of" not in html
        assert "Learn more" not in html

    def test_empty_title(self):
        """タイトルが空の場合は見出しがないことのテスト。"""
        html = HtmlRenderer().render_grouped("", _categories(1))
        assert "<h2>" not in html
        assert html.startswith("<!DOCTYPE html>")

    def test_title_is_escaped(self):
        """タイトルがエスケープされることのテスト。"""
        html = HtmlRenderer().render_grouped("A & B", [])
        assert "<h2>A &amp; B</h2>" in html


class TestHtmlRendererSimple:
    """全件HTMLレポートのテスト。"""

    def test_lists_every_finding(self):
        """重大度に関係なく全件出力されることのテスト。"""
        findings = [
            Finding("a.php", 3, 2, "ERROR", "X", "first"),
            Finding("readme.txt", 0, 0, "NOTICE", "Y", "second", "https://example.com"),
        ]
        html = HtmlRenderer().render_simple("Report", findings)
        assert "<strong>ERROR: X</strong> - Line 3, Column 2" in html
        assert "<strong>NOTICE: Y</strong>\n" in html
        assert "Learn more" in html


class TestTextRenderer:
    """テキストレポートのテスト。"""

    def test_grouped(self):
        """グループ化テキストレポートのテスト。"""
        text = TextRenderer().render_grouped("Report", _categories(4))
        lines = text.splitlines()
        assert lines[0] == "Report"
        assert lines[1] == "======"
        assert "## Security" in lines
        assert "  hello.php:3" in lines
        assert "  hello.php:4" not in lines
        assert "  … out of a total of 4 incidences." in lines

    def test_grouped_single_location(self):
        """位置が1件の場合のテスト。"""
        text = TextRenderer().render_grouped("", _categories(1))
        assert "hello.php:1 - Use `esc_html()` here. (https://example.com/docs)" in text

    def test_simple(self):
        """全件テキストレポートのテスト。"""
        text = TextRenderer().render_simple("", [Finding("a.php", 3, 2, "WARNING", "X", "msg")])
        assert text.splitlines()[:3] == ["a.php", "WARNING: X - Line 3, Column 2", "msg"]


class TestExcelWriter:
    """Excel出力のテスト。"""

    def test_grouped_workbook(self):
        """グループ化ワークブックの内容のテスト。"""
        data = ExcelWriter().render_grouped("Report", _categories(5))
        wb = load_workbook(BytesIO(data))

        assert wb.sheetnames == ["Report", "Summary"]
        ws = wb["Report"]
        assert ws["A1"].value == "Report"
        assert ws.cell(row=3, column=1).value == "カテゴリ"
        assert ws.cell(row=4, column=1).value == "Security"
        assert ws.cell(row=4, column=2).value == "ERROR"
        assert ws.cell(row=4, column=6).value == 5

        summary = wb["Summary"]
        assert summary.cell(row=5, column=1).value == "Security"
        assert summary.cell(row=5, column=2).value == 1
        assert summary.cell(row=5, column=4).value == 5

    def test_simple_workbook_without_title(self):
        """タイトルなしの全件ワークブックのテスト。"""
        findings = [Finding("a.php", 0, 0, "warning", "X", "msg")]
        wb = load_workbook(BytesIO(ExcelWriter().render_simple("", findings)))

        ws = wb["Report"]
        assert ws.cell(row=1, column=1).value == "ファイル"
        assert ws.cell(row=2, column=1).value == "a.php"
        assert ws.cell(row=2, column=2).value == "WARNING"
