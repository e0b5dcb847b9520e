"""Plugin Check結果の読み込みモジュール。"""

from dataclasses import replace
from typing import Any, Dict, List, Optional
from pathlib import Path
import json
import logging
import re

import pandas as pd

from ..models.finding import Finding

logger = logging.getLogger(__name__)

# macOSの一時ディレクトリに付く接頭辞
_PRIVATE_PREFIX = re.compile(r"^/private")


def normalize_file_path(file_path: str) -> str:
    """ファイルパスから/private接頭辞と先頭のスラッシュを取り除く。

    Args:
        file_path: Plugin Checkが出力したパス

    Returns:
        正規化したパス
    """
    return _PRIVATE_PREFIX.sub("", str(file_path)).lstrip("/")


class FindingsReader:
    """strict-json出力や保存済みの結果ファイルをFindingに変換する。"""

    # CSV/Excel形式用の列名マッピング
    COLUMN_MAPPINGS: Dict[str, List[str]] = {
        "file": ["file", "File", "FILE", "Path", "path"],
        "line": ["line", "Line", "LINE"],
        "column": ["column", "Column", "COLUMN", "col"],
        "type": ["type", "Type", "TYPE", "severity", "Severity"],
        "code": ["code", "Code", "CODE"],
        "message": ["message", "Message", "MESSAGE"],
        "docs": ["docs", "Docs", "DOCS", "url", "URL"],
    }

    REQUIRED_COLUMNS = ("file", "type", "code", "message")

    def __init__(self, encoding: str = "utf-8"):
        """リーダーを初期化する。

        Args:
            encoding: ファイルの文字エンコーディング
        """
        self.encoding = encoding

    def parse_json(self, text: Optional[str]) -> List[Finding]:
        """strict-json文字列から指摘を読み込む。

        Args:
            text: wp plugin checkの標準出力

        Returns:
            Findingのリスト。空・不正なJSONの場合は空リスト

        Raises:
            ValueError: JSONのトップレベルが配列でない場合
        """
        if not text or not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Plugin check output is not valid JSON: {e}")
            return []

        if not data:
            return []
        if not isinstance(data, list):
            raise ValueError(
                f"Plugin check output must be a JSON array, got {type(data).__name__}"
            )

        return self._records_to_findings(data)

    def read(self, file_path: str) -> List[Finding]:
        """保存済みの結果ファイルから指摘を読み込む。

        Args:
            file_path: .json, .csv, .xlsx, .xlsmファイルのパス

        Returns:
            Findingのリスト
        """
        path = Path(file_path)
        suffix = path.suffix.lower()

        if suffix == ".json":
            with open(path, "r", encoding=self.encoding) as f:
                findings = self.parse_json(f.read())
        elif suffix in (".csv", ".xlsx", ".xlsm"):
            findings = self._records_to_findings(self._read_table(path))
        else:
            raise ValueError(f"Unsupported file format: {suffix}")

        logger.info(f"Loaded {len(findings)} findings from {path}")
        return findings

    def _read_table(self, path: Path) -> List[Dict[str, Any]]:
        """CSV/Excelファイルを読み込み、標準列名のレコードに変換する。"""
        if path.suffix.lower() == ".csv":
            df = pd.read_csv(path, encoding=self.encoding)
        else:
            df = pd.read_excel(path, sheet_name=0, engine="openpyxl")

        # 空行を削除
        df = df.dropna(how="all")
        column_map = self._resolve_column_names(df.columns.tolist())

        records = []
        for _, row in df.iterrows():
            record = {}
            for standard_name, column in column_map.items():
                value = row[column]
                record[standard_name] = None if pd.isna(value) else value
            records.append(record)
        return records

    def _resolve_column_names(self, columns: List[str]) -> Dict[str, str]:
        """列名マッピングを解決する。"""
        column_map: Dict[str, str] = {}

        for standard_name, variants in self.COLUMN_MAPPINGS.items():
            for variant in variants:
                if variant in columns:
                    column_map[standard_name] = variant
                    break
            else:
                if standard_name in self.REQUIRED_COLUMNS:
                    raise ValueError(
                        f"必須列が見つかりません: {standard_name}。"
                        f"利用可能な列: {columns}"
                    )

        logger.debug(f"Resolved column mappings: {column_map}")
        return column_map

    def _records_to_findings(self, records: List[Any]) -> List[Finding]:
        findings = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning(f"Skipping record {index}: not an object")
                continue
            try:
                finding = Finding.from_dict(record)
            except ValueError as e:
                logger.warning(f"Skipping record {index}: {e}")
                continue

            findings.append(self._normalize(finding))
        return findings

    @staticmethod
    def _normalize(finding: Finding) -> Finding:
        return replace(finding, file=normalize_file_path(finding.file))
