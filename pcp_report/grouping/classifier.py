"""指摘コードからカテゴリを決定する分類器。"""

from typing import Iterable, Optional
import logging

from ..models.rule import MatchType, Rule
from .rule_set import RuleSet, UNGROUPED_ID

logger = logging.getLogger(__name__)


def prefix_match(code: str, patterns: Iterable[str]) -> Optional[str]:
    """codeが前方一致する最初のパターンを返す。"""
    for pattern in patterns:
        if code.startswith(pattern):
            return pattern
    return None


def contains_match(code: str, patterns: Iterable[str]) -> Optional[str]:
    """codeに含まれる最初のパターンを返す。"""
    for pattern in patterns:
        if pattern in code:
            return pattern
    return None


class Classifier:
    """RuleSetに基づいて指摘コードをカテゴリidに分類する。

    前方一致ルールを宣言順にすべて調べてから部分一致ルールを調べる。
    そのため、先に宣言された部分一致ルールが後の前方一致ルールより
    優先されることはない。
    """

    # 照合方式ごとの照合関数（評価順）
    MATCHERS = (
        (MatchType.PREFIX, prefix_match),
        (MatchType.CONTAINS, contains_match),
    )

    def __init__(self, rule_set: RuleSet):
        """分類器を初期化する。

        Args:
            rule_set: 構築済みのルール集合
        """
        self.rule_set = rule_set
        self._passes = [
            (matcher, rule_set.rules_of_type(match_type))
            for match_type, matcher in self.MATCHERS
        ]

    def match(self, code: str) -> Optional[Rule]:
        """codeに一致するルールを返す。

        Args:
            code: 指摘コード

        Returns:
            最初に一致したRule。一致しなければNone
        """
        for matcher, rules in self._passes:
            for rule in rules:
                if matcher(code, rule.patterns) is not None:
                    return rule
        return None

    def classify(self, code: str) -> str:
        """codeのカテゴリidを返す。

        Args:
            code: 指摘コード

        Returns:
            カテゴリid。一致しない場合は"ungrouped"
        """
        rule = self.match(code)
        if rule is None:
            logger.debug(f"No rule matched code: {code}")
            return UNGROUPED_ID
        return self.rule_set.effective_category(rule)
