"""
API 数据模型

定义模组门户返回的数据类，包括模组摘要、完整信息、发布版本和分页结果。
所有模型都是只读快照。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from modportal.constants import ASSETS_URL
from modportal.models.dependency import DependencySpec
from modportal.models.version import (
    ParsedVersion,
    VersionToken,
    parse_version_token,
)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """解析 ISO 8601 时间戳，统一转换为 UTC"""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class ModCategory(Enum):
    """模组分类"""

    NO_CATEGORY = "no-category"
    CONTENT = "content"
    OVERHAUL = "overhaul"
    TWEAKS = "tweaks"
    UTILITIES = "utilities"
    SCENARIOS = "scenarios"
    MOD_PACKS = "mod-packs"
    LOCALIZATIONS = "localizations"
    INTERNAL = "internal"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ModCategory":
        try:
            return cls(value or "no-category")
        except ValueError:
            return cls.NO_CATEGORY


@dataclass(frozen=True)
class InfoJson:
    """发布包内 info.json 的元数据"""

    name: Optional[str] = None
    version: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    factorio_version: Optional[str] = None
    dependencies: Tuple[DependencySpec, ...] = ()

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "InfoJson":
        """
        从 API 数据构建

        Raises:
            ParseError: 依赖声明格式错误
        """
        data = data or {}
        return cls(
            name=data.get("name"),
            version=data.get("version"),
            title=data.get("title"),
            author=data.get("author"),
            factorio_version=data.get("factorio_version"),
            dependencies=tuple(
                DependencySpec.parse(line) for line in data.get("dependencies", [])
            ),
        )


@dataclass(frozen=True)
class ReleaseRecord:
    """模组的一个发布版本"""

    version: VersionToken
    download_url: str
    file_name: str
    released_at: datetime
    sha1: str
    info_json: InfoJson = field(default_factory=InfoJson)

    @classmethod
    def from_api(cls, data: dict) -> "ReleaseRecord":
        """将门户返回的 release 对象转换为 ReleaseRecord"""
        return cls(
            version=parse_version_token(str(data["version"])),
            download_url=data["download_url"],
            file_name=data["file_name"],
            released_at=parse_timestamp(data["released_at"]),
            sha1=data["sha1"],
            info_json=InfoJson.from_api(data.get("info_json")),
        )

    @property
    def is_semver(self) -> bool:
        return isinstance(self.version, ParsedVersion)

    @property
    def factorio_version(self) -> Optional[str]:
        return self.info_json.factorio_version

    @property
    def dependencies(self) -> Tuple[DependencySpec, ...]:
        return self.info_json.dependencies


@dataclass(frozen=True)
class License:
    """模组许可证"""

    id: str = ""
    name: str = ""
    title: str = ""
    description: str = ""
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[dict]) -> "License":
        data = data or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            url=data.get("url"),
        )


def _releases(data: dict) -> Tuple[ReleaseRecord, ...]:
    return tuple(ReleaseRecord.from_api(r) for r in data.get("releases") or [])


@dataclass(frozen=True)
class ModSummary:
    """
    模组摘要

    单个模组查询时只带 latest_release；分页查询使用 namelist 时才带 releases。
    """

    name: str
    owner: str
    title: str = ""
    summary: str = ""
    category: str = "no-category"
    thumbnail: Optional[str] = None
    downloads_count: int = 0
    latest_release: Optional[ReleaseRecord] = None
    releases: Tuple[ReleaseRecord, ...] = ()

    @classmethod
    def from_api(cls, data: dict) -> "ModSummary":
        latest = data.get("latest_release")
        return cls(
            name=data["name"],
            owner=data.get("owner", ""),
            title=data.get("title", ""),
            summary=data.get("summary", ""),
            category=data.get("category") or "no-category",
            thumbnail=data.get("thumbnail"),
            downloads_count=data.get("downloads_count", 0),
            latest_release=ReleaseRecord.from_api(latest) if latest else None,
            releases=_releases(data),
        )

    @property
    def category_kind(self) -> ModCategory:
        return ModCategory.parse(self.category)

    @property
    def thumbnail_url(self) -> Optional[str]:
        if not self.thumbnail:
            return None
        return f"{ASSETS_URL}{self.thumbnail}"


@dataclass(frozen=True)
class ModDetail:
    """模组完整信息，包含全部发布历史"""

    name: str
    owner: str
    title: str = ""
    summary: str = ""
    category: str = "no-category"
    thumbnail: Optional[str] = None
    downloads_count: int = 0
    releases: Tuple[ReleaseRecord, ...] = ()
    changelog: str = ""
    created_at: Optional[datetime] = None
    description: Optional[str] = None
    source_url: Optional[str] = None
    github_path: str = ""
    homepage: Optional[str] = None
    tags: Tuple[str, ...] = ()
    license: License = field(default_factory=License)
    deprecated: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "ModDetail":
        return cls(
            name=data["name"],
            owner=data.get("owner", ""),
            title=data.get("title", ""),
            summary=data.get("summary", ""),
            category=data.get("category") or "no-category",
            thumbnail=data.get("thumbnail"),
            downloads_count=data.get("downloads_count", 0),
            releases=_releases(data),
            changelog=data.get("changelog", ""),
            created_at=parse_timestamp(data.get("created_at")),
            description=data.get("description"),
            source_url=data.get("source_url"),
            github_path=data.get("github_path", ""),
            homepage=data.get("homepage"),
            tags=tuple(data.get("tags") or []),
            license=License.from_api(data.get("license")),
            deprecated=bool(data.get("deprecated", False)),
        )

    @property
    def category_kind(self) -> ModCategory:
        return ModCategory.parse(self.category)

    def to_summary(self) -> ModSummary:
        """转换为摘要，latest_release 取发布历史的最后一项"""
        return ModSummary(
            name=self.name,
            owner=self.owner,
            title=self.title,
            summary=self.summary,
            category=self.category,
            thumbnail=self.thumbnail,
            downloads_count=self.downloads_count,
            latest_release=self.releases[-1] if self.releases else None,
            releases=self.releases,
        )


@dataclass(frozen=True)
class PaginationLinks:
    """分页导航链接"""

    first: Optional[str] = None
    prev: Optional[str] = None
    next: Optional[str] = None
    last: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    """分页信息"""

    count: int
    page: int
    page_count: int
    page_size: int
    links: PaginationLinks = field(default_factory=PaginationLinks)

    @property
    def has_next(self) -> bool:
        return self.links.next is not None or self.page < self.page_count


@dataclass(frozen=True)
class ModPage:
    """一页模组列表"""

    pagination: Pagination
    results: Tuple[ModSummary, ...]

    @classmethod
    def from_api(cls, data: dict) -> "ModPage":
        pagination = data.get("pagination") or {}
        links = pagination.get("links") or {}
        return cls(
            pagination=Pagination(
                count=pagination.get("count", 0),
                page=pagination.get("page", 1),
                page_count=pagination.get("page_count", 1),
                page_size=pagination.get("page_size", 0),
                links=PaginationLinks(
                    first=links.get("first"),
                    prev=links.get("prev"),
                    next=links.get("next"),
                    last=links.get("last"),
                ),
            ),
            results=tuple(ModSummary.from_api(m) for m in data.get("results", [])),
        )
