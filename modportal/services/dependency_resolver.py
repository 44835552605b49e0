"""
依赖处理服务

递归解析必需依赖、依赖去重、不兼容检测。
"""

from typing import Iterable, List, Set, Tuple

from loguru import logger

from modportal.constants import BUILTIN_MODS
from modportal.services.mod_resolver import ModResolver, ResolvedMod


class DependencyResolver:
    """依赖解析器"""

    def __init__(self, resolver: ModResolver):
        self.resolver = resolver
        self._processed: Set[str] = set()
        self._dependencies: List[ResolvedMod] = []

    async def resolve(
        self, mod: ResolvedMod, known: Iterable[str] = ()
    ) -> List[ResolvedMod]:
        """
        解析依赖

        Args:
            mod: 已解析的模组
            known: 已经在处理的模组名，不会重复解析

        Returns:
            新发现的依赖列表
        """
        self._processed = {mod.name, *known}
        self._dependencies = []

        await self._resolve_recursive(mod)

        return list(self._dependencies)

    async def _resolve_recursive(self, mod: ResolvedMod):
        """递归解析依赖"""
        for dep in mod.release.dependencies:
            if not dep.needs_install:
                continue

            if dep.name in BUILTIN_MODS or dep.name in self._processed:
                continue

            self._processed.add(dep.name)

            dep_mod = await self.resolver.resolve(dep.name, dep.required_version)
            if dep_mod is None:
                logger.warning(f"无法解析 {mod.name} 的依赖: {dep}")
                continue

            logger.debug(f"{mod.name} 依赖 {dep_mod.name} {dep_mod.release.version}")
            self._dependencies.append(dep_mod)
            await self._resolve_recursive(dep_mod)

    @staticmethod
    def find_conflicts(mods: Iterable[ResolvedMod]) -> List[Tuple[str, str]]:
        """
        查找不兼容的模组组合

        Returns:
            (声明方, 被声明为不兼容的模组) 列表
        """
        mods = list(mods)
        names = {mod.name for mod in mods}
        conflicts = []
        for mod in mods:
            for dep in mod.release.dependencies:
                if dep.is_incompatible and dep.name in names:
                    conflicts.append((mod.name, dep.name))
        return conflicts

    def clear_cache(self):
        """清除缓存"""
        self._processed.clear()
        self._dependencies.clear()
