"""
模组解析服务

根据模组名和版本范围查询门户，选出要下载的发布版本。
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import semantic_version
from loguru import logger

from modportal.exceptions import APINotFoundError, ParseError
from modportal.models import ConfigModEntry, ModDetail, ModSummary, ReleaseRecord
from modportal.services.api_client import ModPortalClient
from modportal.services.release_selector import ReleaseSelector


@dataclass(frozen=True)
class ResolvedMod:
    """解析结果"""

    name: str
    title: str
    release: ReleaseRecord
    requested: Optional[semantic_version.SimpleSpec] = None


class ModResolver:
    """模组解析器"""

    def __init__(
        self,
        client: ModPortalClient,
        selector: Optional[ReleaseSelector] = None,
        game_version: Optional[str] = None,
        max_concurrent: int = 5,
    ):
        self.client = client
        self.selector = selector or ReleaseSelector()
        self.game_version = game_version
        self.max_concurrent = max_concurrent
        self._details: Dict[str, ModDetail] = {}

    async def get_detail(self, name: str) -> ModDetail:
        """获取模组完整信息（使用缓存）"""
        if name not in self._details:
            self._details[name] = await self.client.fetch_mod_detail(name)
        return self._details[name]

    async def resolve(
        self,
        mod: Union[str, ConfigModEntry],
        version_range: Optional[semantic_version.SimpleSpec] = None,
    ) -> Optional[ResolvedMod]:
        """
        解析模组

        Args:
            mod: 模组名或配置项
            version_range: 版本范围，mod 为配置项时使用配置项中的范围

        Returns:
            ResolvedMod，模组不存在、发布信息中的依赖声明无法解析或没有满足条件的发布版本时返回 None

        Raises:
            VersionError: 发布版本号无法比较
        """
        if isinstance(mod, ConfigModEntry):
            name, version_range = mod.name, mod.version
        else:
            name = mod

        try:
            if version_range is None:
                summary = await self.client.fetch_mod_summary(name)
                release = self.selector.select_best(
                    summary.releases,
                    latest=summary.latest_release,
                    game_version=self.game_version,
                )
                if release is not None:
                    return ResolvedMod(name=name, title=summary.title, release=release)

            detail = await self.get_detail(name)
        except APINotFoundError:
            logger.warning(f"模组 {name} 不存在")
            return None
        except ParseError as e:
            logger.warning(f"模组 {name} 的发布信息无法解析，已跳过: {e}")
            return None

        release = self.selector.select_best(
            detail.releases, version_range, game_version=self.game_version
        )
        if release is None:
            logger.warning(
                f"模组 {name} 没有满足 {version_range.expression if version_range else '*'} 的发布版本"
            )
            return None

        logger.debug(f"模组 {name} 选定版本 {release.version}")
        return ResolvedMod(
            name=name, title=detail.title, release=release, requested=version_range
        )

    async def resolve_many(
        self, mods: Sequence[Union[str, ConfigModEntry]]
    ) -> List[ResolvedMod]:
        """
        并发解析多个模组

        Returns:
            解析成功的模组，顺序与输入一致
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def _resolve(mod):
            async with semaphore:
                return await self.resolve(mod)

        results = await asyncio.gather(*(_resolve(mod) for mod in mods))
        return [result for result in results if result is not None]

    async def fetch_summaries(self, names: Sequence[str]) -> List[ModSummary]:
        """并发获取多个模组的摘要，顺序与输入一致"""
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def _fetch(name: str) -> ModSummary:
            async with semaphore:
                return await self.client.fetch_mod_summary(name)

        return list(await asyncio.gather(*(_fetch(name) for name in names)))

    def clear_cache(self):
        """清除缓存"""
        self._details.clear()
