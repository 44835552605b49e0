"""
主协调器

整合所有服务层组件，实现 解析 → 依赖 → 下载 的流程编排。
"""

from typing import List, Optional, Set

from loguru import logger

from modportal.download import DownloadManager, Priority
from modportal.exceptions import ConfigError
from modportal.models import ModPortalConfig
from modportal.services import (
    Credentials,
    DependencyResolver,
    ModPortalClient,
    ModResolver,
    ResolvedMod,
)


class ModPortalOrchestrator:
    """ModPortal 主协调器"""

    def __init__(
        self,
        config: ModPortalConfig,
        credentials: Optional[Credentials] = None,
        client: Optional[ModPortalClient] = None,
    ):
        self.config = config
        self.credentials = credentials
        self.client = client or ModPortalClient()
        self.resolver = ModResolver(
            self.client,
            game_version=config.metadata.game_version,
            max_concurrent=config.max_concurrent,
        )
        self.dep_resolver = DependencyResolver(self.resolver)
        self.download_manager: Optional[DownloadManager] = None

        self._resolved: List[ResolvedMod] = []
        self._processed_mods: Set[str] = set()
        self._skipped_mods: List[str] = []
        self._conflicts: List[tuple] = []

    def _validate_config(self):
        """验证配置"""
        if not self.config.enabled_mods:
            raise ConfigError("请配置至少一个启用的模组")

    async def resolve(self) -> List[ResolvedMod]:
        """
        解析所有启用的模组及其必需依赖

        Returns:
            需要下载的模组列表，配置中的模组在前，依赖在后
        """
        self._validate_config()

        entries = self.config.enabled_mods
        logger.info(f"开始解析 {len(entries)} 个模组...")

        resolved = await self.resolver.resolve_many(entries)
        self._processed_mods = {mod.name for mod in resolved}
        self._skipped_mods = [
            entry.name for entry in entries if entry.name not in self._processed_mods
        ]
        for name in self._skipped_mods:
            logger.warning(f"无法解析模组: {name}")

        if self.config.with_dependencies:
            for mod in list(resolved):
                deps = await self.dep_resolver.resolve(mod, self._processed_mods)
                if deps:
                    logger.info(f"{mod.name}: 发现 {len(deps)} 个依赖需要处理")
                for dep in deps:
                    self._processed_mods.add(dep.name)
                    resolved.append(dep)

        self._conflicts = DependencyResolver.find_conflicts(resolved)
        for owner, other in self._conflicts:
            logger.warning(f"模组 {owner} 与 {other} 不兼容")

        self._resolved = resolved
        return resolved

    async def run(self):
        """运行完整的下载流程"""
        logger.info("开始 ModPortal 下载任务...")

        try:
            resolved = await self.resolve()
            if not resolved:
                logger.warning("没有可下载的模组")
                return

            credentials = self.credentials or Credentials.from_env()
            target_dir = self.config.target_dir
            logger.info(f"下载目录: {target_dir}")

            self.download_manager = DownloadManager(
                self.client,
                credentials,
                max_concurrent=self.config.max_concurrent,
            )
            requested = {entry.name for entry in self.config.enabled_mods}
            for mod in resolved:
                await self.download_manager.enqueue(
                    mod.name,
                    mod.release,
                    target_dir,
                    Priority.HIGH if mod.name in requested else Priority.NORMAL,
                )

            logger.info(f"启动下载 ({self.config.max_concurrent}并发)...")
            await self.download_manager.run()

            stats = self.download_manager.get_stats()
            logger.success(
                f"下载完成: {stats.completed} 成功, {stats.failed} 失败, {stats.skipped} 跳过"
            )

        except Exception as e:
            logger.error(f"任务执行失败: {e}")
            raise
        finally:
            await self.client.close()

    def get_stats(self) -> dict:
        """获取统计信息"""
        stats = {
            "processed_mods": len(self._processed_mods),
            "skipped": list(self._skipped_mods),
            "conflicts": list(self._conflicts),
            "failed": [],
        }
        if self.download_manager is not None:
            stats["failed"] = list(self.download_manager.get_failed())
        return stats
