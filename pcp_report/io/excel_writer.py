"""レポートのExcel出力モジュール。"""

from typing import Dict, List
from datetime import datetime
from io import BytesIO
import logging

from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font, Alignment, Border, Side

from ..models.category import DisplayCategory
from ..models.finding import Finding, Severity

logger = logging.getLogger(__name__)


class ExcelWriter:
    """Plugin Checkの結果をExcelワークブックに変換する。"""

    # 各重大度の色（RGB hex、#なし）
    SEVERITY_COLORS: Dict[str, str] = {
        Severity.ERROR.value: "FFC7CE",    # 赤
        Severity.WARNING.value: "FFEB9C",  # 黄
    }
    DEFAULT_COLOR = "D9D9D9"  # 灰 - その他

    GROUPED_HEADERS = ["カテゴリ", "種別", "コード", "メッセージ", "位置", "件数", "ドキュメント"]
    SIMPLE_HEADERS = ["ファイル", "種別", "コード", "行", "列", "メッセージ", "ドキュメント"]

    GROUPED_WIDTHS = [24, 10, 50, 60, 40, 8, 40]
    SIMPLE_WIDTHS = [40, 10, 50, 8, 8, 60, 40]

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    def render_grouped(self, title: str, categories: List[DisplayCategory]) -> bytes:
        """カテゴリ別のワークブックを生成する。

        各指摘を1行とし、位置は表示件数まで改行区切りで出力する。
        サマリーシートにカテゴリごとの件数を書き込む。

        Args:
            title: レポートタイトル
            categories: Presenterで整形済みのカテゴリ

        Returns:
            xlsxファイルのバイト列
        """
        wb = Workbook()
        ws = wb.active
        ws.title = "Report"

        row = self._write_title(ws, title)
        self._write_headers(ws, row, self.GROUPED_HEADERS)

        for category in categories:
            for issue in category.issues:
                row += 1
                locations = "\n".join(str(loc) for loc in issue.displayed_locations)
                if issue.has_more_than_limit:
                    locations += f"\n… ({issue.total_locations})"
                values = [
                    category.title,
                    issue.type_label,
                    issue.code,
                    issue.message,
                    locations,
                    issue.total_locations,
                    issue.docs or "",
                ]
                self._write_row(ws, row, values, issue.severity.value)

        self._adjust_column_widths(ws, self.GROUPED_WIDTHS)
        self._write_summary(wb, categories)
        return self._to_bytes(wb)

    def render_simple(self, title: str, findings: List[Finding]) -> bytes:
        """全指摘を並べたワークブックを生成する。

        Args:
            title: レポートタイトル
            findings: 指摘のリスト

        Returns:
            xlsxファイルのバイト列
        """
        wb = Workbook()
        ws = wb.active
        ws.title = "Report"

        row = self._write_title(ws, title)
        self._write_headers(ws, row, self.SIMPLE_HEADERS)

        for finding in findings:
            row += 1
            values = [
                finding.file,
                finding.severity.upper(),
                finding.code,
                finding.line if finding.has_location else "",
                finding.column if finding.has_location else "",
                finding.message,
                finding.docs or "",
            ]
            self._write_row(ws, row, values, finding.severity.lower())

        self._adjust_column_widths(ws, self.SIMPLE_WIDTHS)
        return self._to_bytes(wb)

    @staticmethod
    def _write_title(ws, title: str) -> int:
        """タイトル行を書き込み、ヘッダー行の行番号を返す。"""
        if not title:
            return 1
        ws["A1"] = title
        ws["A1"].font = Font(bold=True, size=14)
        return 3

    def _write_headers(self, ws, row: int, headers: List[str]) -> None:
        header_fill = PatternFill(
            start_color="4472C4",
            end_color="4472C4",
            fill_type="solid"
        )
        white_font = Font(bold=True, color="FFFFFF")

        for i, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=i)
            cell.value = header
            cell.font = white_font
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.fill = header_fill
            cell.border = self.THIN_BORDER

    def _write_row(self, ws, row: int, values: list, severity: str) -> None:
        color = self.SEVERITY_COLORS.get(severity, self.DEFAULT_COLOR)

        for i, value in enumerate(values, 1):
            cell = ws.cell(row=row, column=i)
            cell.value = value
            cell.alignment = Alignment(wrap_text=True, vertical="top")
            cell.border = self.THIN_BORDER

        # 種別列のみ色付け
        type_cell = ws.cell(row=row, column=2)
        type_cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
        type_cell.alignment = Alignment(horizontal="center", vertical="top")

    @staticmethod
    def _adjust_column_widths(ws, widths: List[int]) -> None:
        for i, width in enumerate(widths, 1):
            col_letter = ws.cell(row=1, column=i).column_letter
            ws.column_dimensions[col_letter].width = width

    def _write_summary(self, wb: Workbook, categories: List[DisplayCategory]) -> None:
        """カテゴリごとの件数を含むサマリーシートを追加する。"""
        ws = wb.create_sheet("Summary")

        ws["A1"] = "カテゴリ別サマリー"
        ws["A1"].font = Font(bold=True, size=14)
        ws.merge_cells("A1:D1")

        ws["A2"] = f"生成日時: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        ws.merge_cells("A2:D2")

        headers = ["カテゴリ", "ERROR", "WARNING", "位置の合計"]
        for i, header in enumerate(headers, 1):
            cell = ws.cell(row=4, column=i)
            cell.value = header
            cell.font = Font(bold=True)
            cell.border = self.THIN_BORDER
            cell.alignment = Alignment(horizontal="center")

        row = 5
        for category in categories:
            values = [
                category.title,
                category.error_count,
                category.warning_count,
                sum(issue.total_locations for issue in category.issues),
            ]
            for i, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=i)
                cell.value = value
                cell.border = self.THIN_BORDER
            row += 1

        ws.column_dimensions["A"].width = 30
        for col_letter in ("B", "C", "D"):
            ws.column_dimensions[col_letter].width = 12

    @staticmethod
    def _to_bytes(wb: Workbook) -> bytes:
        buffer = BytesIO()
        wb.save(buffer)
        logger.debug("Workbook rendered")
        return buffer.getvalue()
