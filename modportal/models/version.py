"""
版本号模型

门户返回的版本号并不总是严格的语义化版本，因此用两种类型表示：
能解析的用 ParsedVersion，其余原样保存在 RawVersion 中。
"""

from dataclasses import dataclass
from typing import Tuple, Union

import semantic_version


@dataclass(frozen=True)
class ParsedVersion:
    """严格语义化版本"""

    version: semantic_version.Version

    @property
    def major(self) -> int:
        return self.version.major

    @property
    def minor(self) -> int:
        return self.version.minor

    @property
    def patch(self) -> int:
        return self.version.patch

    @property
    def prerelease(self) -> Tuple[str, ...]:
        return tuple(self.version.prerelease)

    @property
    def build(self) -> Tuple[str, ...]:
        return tuple(self.version.build)

    def precedence(self) -> tuple:
        return precedence_key(self.version)

    def __lt__(self, other: "ParsedVersion") -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return self.precedence() < other.precedence()

    def __le__(self, other: "ParsedVersion") -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return self.precedence() <= other.precedence()

    def __gt__(self, other: "ParsedVersion") -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return self.precedence() > other.precedence()

    def __ge__(self, other: "ParsedVersion") -> bool:
        if not isinstance(other, ParsedVersion):
            return NotImplemented
        return self.precedence() >= other.precedence()

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class RawVersion:
    """无法按语义化版本解析的原始字符串"""

    text: str

    def __str__(self) -> str:
        return self.text


VersionToken = Union[ParsedVersion, RawVersion]


def parse_version_token(text: str) -> VersionToken:
    """
    解析门户返回的版本字符串

    Args:
        text: 版本字符串

    Returns:
        ParsedVersion 或保留原文的 RawVersion
    """
    try:
        return ParsedVersion(semantic_version.Version(text))
    except ValueError:
        return RawVersion(text)


def precedence_key(version: semantic_version.Version) -> tuple:
    """
    按语义化版本优先级生成排序键

    构建元数据不参与比较；预发布版本低于对应的正式版本。
    """
    prerelease = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in version.prerelease
    )
    return (
        version.major,
        version.minor,
        version.patch,
        0 if version.prerelease else 1,
        prerelease,
    )
