"""ルールに基づく指摘のグループ化モジュール。"""

from .rule_set import RuleSet, RuleConfigError, UNGROUPED_ID, UNGROUPED_TITLE
from .classifier import Classifier, prefix_match, contains_match
from .aggregator import Aggregator, aggregate
from .presenter import Presenter, present

__all__ = [
    "RuleSet",
    "RuleConfigError",
    "UNGROUPED_ID",
    "UNGROUPED_TITLE",
    "Classifier",
    "prefix_match",
    "contains_match",
    "Aggregator",
    "aggregate",
    "Presenter",
    "present",
]
