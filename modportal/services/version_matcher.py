"""
版本匹配服务

判断发布版本是否满足版本范围，并处理门户历史上的 "0.0.x" 版本号问题。
"""

import re
from typing import Optional

import semantic_version

from modportal.exceptions import VersionError
from modportal.models.api import ReleaseRecord
from modportal.models.version import ParsedVersion, RawVersion, VersionToken


LEGACY_PREFIX = "0.0."
LEGACY_REPLACEMENT = "0.1."

_LEGACY_OPERAND_RE = re.compile(r"(^|[<>=!~^,])0\.0\.")


def rewrite_legacy_version(text: str) -> str:
    """
    改写旧式 "0.0.x" 版本号

    早期模组的版本号以 "0.0." 开头且常常不符合语义化版本规则，
    比较前统一改写为 "0.1."。既可以改写单个版本号，也可以改写
    版本范围表达式中的每个操作数，二者必须同时改写才能保持比较结果一致。
    """
    return _LEGACY_OPERAND_RE.sub(r"\g<1>" + LEGACY_REPLACEMENT, text)


def is_legacy_version(text: str) -> bool:
    return text.startswith(LEGACY_PREFIX)


def _legacy_to_version(token: RawVersion) -> semantic_version.Version:
    if not is_legacy_version(token.text):
        raise VersionError(
            f"无法比较的版本号: {token.text!r}", context={"version": token.text}
        )

    rewritten = rewrite_legacy_version(token.text)
    try:
        return semantic_version.Version(rewritten)
    except ValueError:
        pass
    try:
        # 例如 "0.0.07" 这类带前导零的版本号
        return semantic_version.Version.coerce(rewritten)
    except ValueError as e:
        raise VersionError(
            f"无法解析旧式版本号: {token.text!r}",
            context={"version": token.text, "rewritten": rewritten},
        ) from e


def comparable_version(token: VersionToken) -> semantic_version.Version:
    """
    获取可参与排序的版本

    旧式版本号经改写解析后再放回 0.0.x，才能与严格解析的 0.0.x 版本正确排序。

    Raises:
        VersionError: 原始版本号不是 "0.0." 开头，或改写后仍无法解析
    """
    if isinstance(token, ParsedVersion):
        return token.version
    if isinstance(token, RawVersion):
        version = _legacy_to_version(token)
        return semantic_version.Version(
            major=0,
            minor=0,
            patch=version.patch,
            prerelease=version.prerelease,
            build=version.build,
        )
    raise TypeError(f"不支持的版本类型: {type(token).__name__}")


def matches(version_range: semantic_version.SimpleSpec, token: VersionToken) -> bool:
    """
    判断版本是否满足版本范围

    Raises:
        VersionError: 原始版本号无法比较
    """
    if isinstance(token, ParsedVersion):
        return version_range.match(token.version)
    if isinstance(token, RawVersion):
        version = _legacy_to_version(token)
        legacy_range = semantic_version.SimpleSpec(
            rewrite_legacy_version(version_range.expression)
        )
        return legacy_range.match(version)
    raise TypeError(f"不支持的版本类型: {type(token).__name__}")


class VersionMatcher:
    """版本匹配器"""

    def matches(
        self,
        version_range: Optional[semantic_version.SimpleSpec],
        token: VersionToken,
    ) -> bool:
        """
        检查版本是否满足范围

        Args:
            version_range: 版本范围，None 表示不限制
            token: 发布版本号

        Returns:
            是否匹配
        """
        if version_range is None:
            return True
        return matches(version_range, token)

    def matches_release(
        self,
        release: ReleaseRecord,
        version_range: Optional[semantic_version.SimpleSpec],
    ) -> bool:
        return self.matches(version_range, release.version)

    def supports_game(self, release: ReleaseRecord, game_version: Optional[str]) -> bool:
        """
        检查发布版本是否适用于指定的游戏主版本

        info.json 没有声明 factorio_version 时视为适用。
        """
        if not game_version or not release.factorio_version:
            return True
        return release.factorio_version == game_version
