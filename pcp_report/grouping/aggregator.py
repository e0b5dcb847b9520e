"""指摘をカテゴリ・コード単位に集約するモジュール。"""

from typing import Dict, Iterable, List, Optional
import logging

from ..models.category import Category, GroupedIssue
from ..models.finding import Finding, Severity
from .classifier import Classifier
from .rule_set import RuleSet, UNGROUPED_ID, UNGROUPED_TITLE

logger = logging.getLogger(__name__)

# カテゴリ内の出力順（errorブロックの後にwarningブロック）
SEVERITY_ORDER = (Severity.ERROR, Severity.WARNING)


class Aggregator:
    """指摘リストをカテゴリツリーに集約する。"""

    def __init__(self, rule_set: RuleSet):
        """集約器を初期化する。

        Args:
            rule_set: 構築済みのルール集合
        """
        self.rule_set = rule_set
        self.classifier = Classifier(rule_set)

    def aggregate(self, findings: Iterable[Finding]) -> List[Category]:
        """指摘をカテゴリごとにまとめる。

        error/warning以外の重大度の指摘は出力に含めない。同じカテゴリ内で
        同じコードが再度現れた場合は位置だけを追加し、message/docsは
        最初の指摘のものを維持する。

        Args:
            findings: 指摘の列（変更しない）

        Returns:
            宣言順に並んだCategoryのリスト。"ungrouped"は常に末尾
        """
        # category_id -> severity -> code -> GroupedIssue
        buckets: Dict[str, Dict[Severity, Dict[str, GroupedIssue]]] = {}
        total = 0
        dropped = 0

        for finding in findings:
            total += 1
            severity = finding.severity_type
            if severity is None:
                dropped += 1
                continue

            category_id = self.classifier.classify(finding.code)
            by_severity = buckets.setdefault(
                category_id, {s: {} for s in SEVERITY_ORDER}
            )
            issues = by_severity[severity]

            issue = issues.get(finding.code)
            if issue is None:
                issue = GroupedIssue(
                    severity=severity,
                    code=finding.code,
                    message=finding.message,
                    docs=finding.docs,
                )
                issues[finding.code] = issue
            issue.locations.append(finding.location)

        if dropped:
            logger.debug(
                f"Dropped {dropped} of {total} findings with severity other than error/warning"
            )

        categories = []
        for rule in self.rule_set.top_level():
            category = self._build_category(rule.id, rule.title, buckets.get(rule.id))
            if category is not None:
                categories.append(category)

        misc = self._build_category(UNGROUPED_ID, UNGROUPED_TITLE, buckets.get(UNGROUPED_ID))
        if misc is not None:
            categories.append(misc)

        logger.debug(f"Aggregated {total - dropped} findings into {len(categories)} categories")
        return categories

    @staticmethod
    def _build_category(category_id: str, title: str, by_severity) -> Optional[Category]:
        if not by_severity:
            return None

        issues: List[GroupedIssue] = []
        for severity in SEVERITY_ORDER:
            issues.extend(by_severity[severity].values())

        if not issues:
            return None
        return Category(id=category_id, title=title, issues=issues)


def aggregate(findings: Iterable[Finding], rule_set: RuleSet) -> List[Category]:
    """Aggregatorのショートカット。"""
    return Aggregator(rule_set).aggregate(findings)
