"""集約結果を表示用に整形するモジュール。"""

from typing import Iterable, List
import logging

from ..models.category import (
    Category,
    DisplayCategory,
    DisplayIssue,
    GroupedIssue,
    DEFAULT_DISPLAY_LIMIT,
    unique_locations,
)

logger = logging.getLogger(__name__)


class Presenter:
    """GroupedIssueの位置リストを重複排除・切り詰めする。"""

    def __init__(self, limit: int = DEFAULT_DISPLAY_LIMIT):
        """プレゼンターを初期化する。

        Args:
            limit: 表示する位置の最大件数

        Raises:
            ValueError: limitが正の整数でない場合
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"Display limit must be a positive integer: {limit!r}")
        self.limit = limit

    def present(self, issue: GroupedIssue) -> DisplayIssue:
        """GroupedIssueをDisplayIssueに変換する（元のissueは変更しない）。

        Args:
            issue: 集約済みの指摘

        Returns:
            表示用の指摘
        """
        locations = unique_locations(issue.locations)
        total = len(locations)

        return DisplayIssue(
            severity=issue.severity,
            code=issue.code,
            message=issue.message,
            docs=issue.docs,
            unique_locations=locations,
            displayed_locations=locations[:self.limit],
            is_single_location=(total == 1),
            has_more_than_limit=(total > self.limit),
            total_locations=total,
        )

    def present_categories(self, categories: Iterable[Category]) -> List[DisplayCategory]:
        """カテゴリ全体を表示用に変換する。

        Args:
            categories: Aggregatorの出力

        Returns:
            DisplayCategoryのリスト（順序は入力のまま）
        """
        result = [
            DisplayCategory(
                id=category.id,
                title=category.title,
                issues=[self.present(issue) for issue in category.issues],
            )
            for category in categories
        ]
        logger.debug(f"Prepared {len(result)} categories for display (limit={self.limit})")
        return result


def present(issue: GroupedIssue, limit: int = DEFAULT_DISPLAY_LIMIT) -> DisplayIssue:
    """Presenterのショートカット。"""
    return Presenter(limit).present(issue)
