"""Data models for plugin check report grouping."""

from .finding import Finding, Location, Severity
from .rule import Rule, MatchType
from .category import (
    GroupedIssue,
    Category,
    DisplayIssue,
    DisplayCategory,
    DEFAULT_DISPLAY_LIMIT,
)

__all__ = [
    "Finding",
    "Location",
    "Severity",
    "Rule",
    "MatchType",
    "GroupedIssue",
    "Category",
    "DisplayIssue",
    "DisplayCategory",
    "DEFAULT_DISPLAY_LIMIT",
]
