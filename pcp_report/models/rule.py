"""グループ分類ルールのモデル。"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


class MatchType(Enum):
    """ルールの照合方式。"""
    PREFIX = "prefix"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Rule:
    """分類ルール1件。

    match_typeがNoneのルールは子ルールを束ねるだけのコンテナ。
    parent_idは別ルールのidへの参照（階層は1段のみ）。
    """
    id: str
    title: str
    match_type: Optional[MatchType] = None
    patterns: Tuple[str, ...] = ()
    parent_id: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.match_type is None

    @property
    def is_child(self) -> bool:
        return bool(self.parent_id)

    @classmethod
    def from_record(cls, record: dict) -> "Rule":
        """ルールローダーが平坦化したレコードからRuleを生成する。

        Args:
            record: キー id, title, type（任意）, checks（任意）, parent（任意）

        Returns:
            Ruleインスタンス
        """
        type_value = record.get("type") or None
        return cls(
            id=str(record["id"]),
            title=str(record.get("title", "")),
            match_type=MatchType(type_value) if type_value else None,
            patterns=tuple(str(p) for p in record.get("checks") or ()),
            parent_id=record.get("parent") or None,
        )

    def __str__(self) -> str:
        kind = self.match_type.value if self.match_type else "container"
        return f"{self.id} ({kind})"
