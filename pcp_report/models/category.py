"""グループ化レポートの集計結果モデル。"""

from dataclasses import dataclass, field
from typing import List, Optional

from .finding import Location, Severity

DEFAULT_DISPLAY_LIMIT = 3


def unique_locations(locations: List[Location]) -> List[Location]:
    """(file, line)で重複を除いた位置リストを返す（初出順を維持）。

    Args:
        locations: 位置のリスト

    Returns:
        重複排除後の新しいリスト
    """
    seen = set()
    result = []
    for location in locations:
        if location.dedup_key in seen:
            continue
        seen.add(location.dedup_key)
        result.append(location)
    return result


@dataclass
class GroupedIssue:
    """カテゴリ内の同一コードの指摘をまとめたもの。"""
    severity: Severity
    code: str
    message: str
    docs: Optional[str] = None
    locations: List[Location] = field(default_factory=list)

    @property
    def total_locations(self) -> int:
        """重複を除いた位置の件数。"""
        return len(unique_locations(self.locations))

    def has_more_than_limit(self, limit: int = DEFAULT_DISPLAY_LIMIT) -> bool:
        return self.total_locations > limit


@dataclass
class Category:
    """出力上の1グループ。"""
    id: str
    title: str
    issues: List[GroupedIssue] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.issues)


@dataclass(frozen=True)
class DisplayIssue:
    """表示用に整形したGroupedIssue。"""
    severity: Severity
    code: str
    message: str
    docs: Optional[str]
    unique_locations: List[Location]
    displayed_locations: List[Location]
    is_single_location: bool
    has_more_than_limit: bool
    total_locations: int

    @property
    def type_label(self) -> str:
        """テンプレートで使うERROR/WARNINGラベル。"""
        return self.severity.value.upper()


@dataclass(frozen=True)
class DisplayCategory:
    """表示用に整形したCategory。"""
    id: str
    title: str
    issues: List[DisplayIssue]

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.WARNING)
