"""Plugin Checkの指摘情報モデル。"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


class Severity(Enum):
    """グループ化レポートで扱う重大度。"""
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def parse(cls, value) -> Optional["Severity"]:
        """文字列から重大度をパースする（大文字小文字を区別しない）。

        Args:
            value: 重大度の値（例: "ERROR", "warning"）

        Returns:
            Severity列挙値。error/warning以外の場合はNone
        """
        if value is None:
            return None

        value_str = str(value).lower().strip()
        for member in cls:
            if member.value == value_str:
                return member
        return None


@dataclass(frozen=True)
class Location:
    """指摘の発生位置。"""
    file: str
    line: int = 0
    column: int = 0

    @property
    def has_position(self) -> bool:
        """行番号を持つかどうか（0は位置なし）。"""
        return self.line > 0

    @property
    def dedup_key(self) -> Tuple[str, int]:
        """重複排除用のキー。列番号は含めない。"""
        return (self.file, self.line)

    def __str__(self) -> str:
        if self.has_position:
            return f"{self.file}:{self.line}"
        return self.file


@dataclass(frozen=True)
class Finding:
    """Plugin Checkの指摘1件。"""
    file: str
    line: int
    column: int
    severity: str
    code: str
    message: str
    docs: Optional[str] = None

    @property
    def severity_type(self) -> Optional[Severity]:
        """正規化された重大度。error/warning以外はNone。"""
        return Severity.parse(self.severity)

    @property
    def has_location(self) -> bool:
        return self.line > 0

    @property
    def location(self) -> Location:
        return Location(file=self.file, line=self.line, column=self.column)

    @classmethod
    def from_dict(cls, record: dict) -> "Finding":
        """strict-json出力の1レコードからFindingを生成する。

        Args:
            record: デコード済みのレコード。キー: file, line, column, type,
                    code, message, docs（任意）

        Returns:
            Findingインスタンス

        Raises:
            ValueError: codeが空の場合
        """
        code = str(record.get("code") or "").strip()
        if not code:
            raise ValueError(f"Finding has no code: {record!r}")

        docs = record.get("docs")
        return cls(
            file=str(record.get("file") or ""),
            line=cls._parse_int(record.get("line")),
            column=cls._parse_int(record.get("column")),
            severity=str(record.get("type") or record.get("severity") or ""),
            code=code,
            message=str(record.get("message") or ""),
            docs=str(docs) if docs else None,
        )

    @staticmethod
    def _parse_int(value) -> int:
        """行・列番号を非負整数に変換する。"""
        if value is None or value == "":
            return 0
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(number, 0)

    def __str__(self) -> str:
        return f"{self.severity.upper()} {self.code} at {self.location}"
