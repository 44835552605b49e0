"""
ModPortal 数据模型包

包含版本号、依赖声明、API 模型和配置模型定义。
"""

from modportal.models.version import (
    ParsedVersion,
    RawVersion,
    VersionToken,
    parse_version_token,
)
from modportal.models.dependency import (
    DependencyPrefix,
    DependencySpec,
    parse_dependency,
    parse_version_range,
    serialize_dependency,
)
from modportal.models.api import (
    InfoJson,
    License,
    ModCategory,
    ModDetail,
    ModPage,
    ModSummary,
    Pagination,
    PaginationLinks,
    ReleaseRecord,
)
from modportal.models.config import ConfigModEntry, Metadata, ModPortalConfig
from modportal.models.modlist import ModList, ModListEntry

__all__ = [
    # 版本号
    "ParsedVersion",
    "RawVersion",
    "VersionToken",
    "parse_version_token",
    # 依赖声明
    "DependencyPrefix",
    "DependencySpec",
    "parse_dependency",
    "parse_version_range",
    "serialize_dependency",
    # API 模型
    "InfoJson",
    "License",
    "ModCategory",
    "ModDetail",
    "ModPage",
    "ModSummary",
    "Pagination",
    "PaginationLinks",
    "ReleaseRecord",
    # 配置模型
    "ConfigModEntry",
    "Metadata",
    "ModPortalConfig",
    "ModList",
    "ModListEntry",
]
