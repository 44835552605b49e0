"""
依赖声明模型

info.json 中的每条依赖是一行文本：

    [前缀] 名称 [比较符 版本]

例如 "base >= 0.18.27"、"? helper_mod"、"(?) other < 8.1"。
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import semantic_version

from modportal.exceptions import InvalidPrefixError, ParseError


class DependencyPrefix(Enum):
    """依赖前缀"""

    REQUIRED = ""
    INCOMPATIBLE = "!"
    OPTIONAL = "?"
    HIDDEN_OPTIONAL = "(?)"
    NON_CHANGING = "~"

    @classmethod
    def parse(cls, marker: str) -> "DependencyPrefix":
        """按标记精确匹配前缀，空字符串表示必需依赖"""
        try:
            return cls(marker)
        except ValueError:
            raise InvalidPrefixError(
                f"invalid prefix: {marker!r}", context={"marker": marker}
            ) from None

    def __str__(self) -> str:
        return self.value


_OPERATOR_RE = re.compile(r"^(<=|>=|==|!=|~=|<|>|=|\^|~)?(.*)$")


def parse_version_range(expression: str) -> semantic_version.SimpleSpec:
    """
    解析版本范围表达式，如 ">=0.18.27"

    Raises:
        ParseError: 表达式无效
    """
    try:
        return semantic_version.SimpleSpec(expression)
    except ValueError as e:
        raise ParseError(
            f"invalid version range: {expression!r}",
            context={"expression": expression, "error": str(e)},
        ) from e


def split_version_range(spec: semantic_version.SimpleSpec) -> Tuple[str, str]:
    """将版本范围拆成 (比较符, 版本)，用于序列化"""
    match = _OPERATOR_RE.match(spec.expression)
    # 省略比较符等同于 "="
    return match.group(1) or "=", match.group(2)


def _tokenize(line: str) -> List[str]:
    return line.split()


@dataclass(frozen=True)
class DependencySpec:
    """一条依赖声明"""

    name: str
    prefix: DependencyPrefix = DependencyPrefix.REQUIRED
    required_version: Optional[semantic_version.SimpleSpec] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ParseError(
                "dependency name must not be empty", context={"name": self.name}
            )

    @classmethod
    def parse(cls, line: str) -> "DependencySpec":
        """
        解析一行依赖声明

        按空白分词后只接受三种形态：
            2 段: 前缀 名称
            3 段: 名称 比较符 版本
            4 段: 前缀 名称 比较符 版本

        Raises:
            ParseError: 格式或版本范围无效
            InvalidPrefixError: 前缀未知
        """
        tokens = _tokenize(line)

        if len(tokens) == 2:
            marker, name = tokens
            return cls(name=name, prefix=DependencyPrefix.parse(marker))

        if len(tokens) == 3:
            name, operator, version = tokens
            return cls(
                name=name,
                required_version=parse_version_range(operator + version),
            )

        if len(tokens) == 4:
            marker, name, operator, version = tokens
            return cls(
                name=name,
                prefix=DependencyPrefix.parse(marker),
                required_version=parse_version_range(operator + version),
            )

        raise ParseError(
            f"invalid dependency format: {line!r}", context={"line": line}
        )

    @property
    def is_required(self) -> bool:
        return self.prefix == DependencyPrefix.REQUIRED

    @property
    def needs_install(self) -> bool:
        """前缀为 ~ 的依赖同样必须安装，只是不影响加载顺序"""
        return self.prefix in (DependencyPrefix.REQUIRED, DependencyPrefix.NON_CHANGING)

    @property
    def is_optional(self) -> bool:
        return self.prefix in (
            DependencyPrefix.OPTIONAL,
            DependencyPrefix.HIDDEN_OPTIONAL,
        )

    @property
    def is_incompatible(self) -> bool:
        return self.prefix == DependencyPrefix.INCOMPATIBLE

    def __str__(self) -> str:
        parts = []
        if self.prefix != DependencyPrefix.REQUIRED:
            parts.append(self.prefix.value)
        parts.append(self.name)
        if self.required_version is not None:
            parts.extend(split_version_range(self.required_version))
        return " ".join(parts)


def parse_dependency(line: str) -> DependencySpec:
    """解析依赖声明，见 DependencySpec.parse"""
    return DependencySpec.parse(line)


def serialize_dependency(spec: DependencySpec) -> str:
    """序列化为依赖声明行，是 parse_dependency 的逆操作"""
    return str(spec)
