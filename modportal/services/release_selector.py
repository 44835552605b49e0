"""
发布版本选择服务

从一组发布版本中筛选满足版本范围的候选，并选出最新的一个。
"""

from typing import Iterable, List, Optional

import semantic_version

from modportal.models.api import ReleaseRecord
from modportal.models.version import precedence_key
from modportal.services.version_matcher import VersionMatcher, comparable_version


def _order_key(release: ReleaseRecord) -> tuple:
    # 版本相同时发布时间较晚者优先
    return (
        precedence_key(comparable_version(release.version)),
        release.released_at.timestamp() if release.released_at else 0.0,
    )


def sort_releases(releases: Iterable[ReleaseRecord]) -> List[ReleaseRecord]:
    """
    按版本升序排列

    排序是稳定的，版本和发布时间都相同时保留原有顺序。

    Raises:
        VersionError: 存在无法比较的原始版本号
    """
    return sorted(releases, key=_order_key)


class ReleaseSelector:
    """发布版本选择器"""

    def __init__(self, matcher: Optional[VersionMatcher] = None):
        self.matcher = matcher or VersionMatcher()

    def filter(
        self,
        releases: Iterable[ReleaseRecord],
        version_range: Optional[semantic_version.SimpleSpec],
        game_version: Optional[str] = None,
    ) -> List[ReleaseRecord]:
        """筛选满足版本范围（以及游戏版本）的发布版本，保持原有顺序"""
        return [
            release
            for release in releases
            if self.matcher.supports_game(release, game_version)
            and self.matcher.matches(version_range, release.version)
        ]

    def select_best(
        self,
        releases: Iterable[ReleaseRecord],
        version_range: Optional[semantic_version.SimpleSpec] = None,
        latest: Optional[ReleaseRecord] = None,
        game_version: Optional[str] = None,
    ) -> Optional[ReleaseRecord]:
        """
        选出最合适的发布版本

        Args:
            releases: 候选发布版本
            version_range: 版本范围，None 表示不限制
            latest: 门户标记的最新版本，仅在不限制版本时使用
            game_version: 游戏主版本，如 "1.1"

        Returns:
            最合适的发布版本，没有候选时返回 None
        """
        if version_range is None and latest is not None:
            if self.matcher.supports_game(latest, game_version):
                return latest

        candidates = self.filter(releases, version_range, game_version)
        # max 在键相同时返回先出现的元素
        return max(candidates, key=_order_key, default=None)


def select_best(
    releases: Iterable[ReleaseRecord],
    version_range: Optional[semantic_version.SimpleSpec] = None,
    latest: Optional[ReleaseRecord] = None,
) -> Optional[ReleaseRecord]:
    """见 ReleaseSelector.select_best"""
    return ReleaseSelector().select_best(releases, version_range, latest)
