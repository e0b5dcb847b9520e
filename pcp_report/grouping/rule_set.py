"""分類ルールの集合。"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Union
import logging

from ..models.rule import MatchType, Rule

logger = logging.getLogger(__name__)

# 一致しなかった指摘の予約カテゴリ
UNGROUPED_ID = "ungrouped"
UNGROUPED_TITLE = "Misc Issues"


class RuleConfigError(Exception):
    """ルール設定の不整合。"""
    pass


class RuleSet:
    """宣言順を保持した読み取り専用のルール集合。

    ルールはidをキーにした平坦なマップで保持し、階層は子ルールの
    parent_idによる1段の参照だけで表現する。宣言順はマッチングの
    優先順位であり、カテゴリの表示順でもある。
    """

    def __init__(self, rules: Iterable[Rule]):
        """ルール集合を構築する。

        Args:
            rules: 宣言順に並んだRuleの列

        Raises:
            RuleConfigError: idの重複、未知のparent参照、2段以上の階層、
                パターンを持たない照合ルールがある場合
        """
        rules_by_id: Dict[str, Rule] = {}
        for rule in rules:
            if not rule.id:
                raise RuleConfigError("Rule id must not be empty")
            if rule.id == UNGROUPED_ID:
                raise RuleConfigError(f"Rule id '{UNGROUPED_ID}' is reserved")
            if rule.id in rules_by_id:
                raise RuleConfigError(f"Duplicate rule id: {rule.id}")
            if rule.match_type is not None and not rule.patterns:
                raise RuleConfigError(
                    f"Rule '{rule.id}' has type '{rule.match_type.value}' but no checks"
                )
            rules_by_id[rule.id] = rule

        for rule in rules_by_id.values():
            self._validate_parent(rule, rules_by_id)

        self._rules = MappingProxyType(rules_by_id)
        logger.debug(f"RuleSet built with {len(rules_by_id)} rules")

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "RuleSet":
        """検証済みのルールレコードから構築する。

        Args:
            records: id, title, type, checks, parentをキーに持つ辞書の列

        Returns:
            RuleSetインスタンス
        """
        rules = []
        for record in records:
            try:
                rules.append(Rule.from_record(record))
            except (KeyError, ValueError) as e:
                raise RuleConfigError(f"Invalid rule record {record!r}: {e}") from e
        return cls(rules)

    @staticmethod
    def _validate_parent(rule: Rule, rules_by_id: Dict[str, Rule]) -> None:
        if not rule.parent_id:
            return

        if rule.parent_id == rule.id:
            raise RuleConfigError(f"Rule '{rule.id}' cannot be its own parent")

        parent = rules_by_id.get(rule.parent_id)
        if parent is None:
            raise RuleConfigError(
                f"Rule '{rule.id}' references unknown parent '{rule.parent_id}'"
            )
        if parent.parent_id:
            raise RuleConfigError(
                f"Rule '{rule.id}' has parent '{parent.id}' which itself has "
                f"parent '{parent.parent_id}'; only one level of nesting is supported"
            )

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def __getitem__(self, rule_id: str) -> Rule:
        return self._rules[rule_id]

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def ids(self) -> List[str]:
        return list(self._rules)

    def top_level(self) -> List[Rule]:
        """親を持たないルールを宣言順で返す。"""
        return [rule for rule in self if not rule.is_child]

    def children_of(self, rule_id: str) -> List[Rule]:
        return [rule for rule in self if rule.parent_id == rule_id]

    def rules_of_type(self, match_type: MatchType) -> List[Rule]:
        """指定した照合方式のルールを宣言順で返す。"""
        return [rule for rule in self if rule.match_type is match_type]

    def effective_category(self, rule: Union[Rule, str]) -> str:
        """ルールが属するカテゴリidを返す。

        Args:
            rule: Ruleまたはルールid

        Returns:
            子ルールなら親のid、それ以外は自身のid

        Raises:
            KeyError: 未知のルールidの場合
        """
        if isinstance(rule, str):
            rule = self._rules[rule]
        return rule.parent_id or rule.id

    def __repr__(self) -> str:
        return f"RuleSet({self.ids!r})"
