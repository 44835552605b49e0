"""
CLI 模块

命令行接口实现。
"""

import asyncio
from typing import Optional

import click
from loguru import logger

from modportal import __version__
from modportal.constants import BUILTIN_MODS
from modportal.exceptions import ModPortalError
from modportal.logger import setup_logger
from modportal.models import ConfigModEntry, ModList, ModPortalConfig
from modportal.orchestrator import ModPortalOrchestrator
from modportal.services import login
from modportal.utils import load_config_file, save_config_file


async def load_config(config_path: str, mod_list: Optional[str]) -> ModPortalConfig:
    """加载配置文件，并合并 mod-list.json 中启用的模组（游戏自带的除外）"""
    config = ModPortalConfig.from_dict(await load_config_file(config_path))

    if mod_list:
        imported = await ModList.load(mod_list)
        added = [
            name
            for name in imported.enabled_names
            if name not in BUILTIN_MODS and config.add_mod(ConfigModEntry(name=name))
        ]
        if added:
            logger.info(f"从 {mod_list} 导入了 {len(added)} 个模组")
            await save_config_file(config_path, config.to_dict())

    return config


async def run_async(
    config_path: str,
    mod_list: Optional[str],
    download_dir: Optional[str],
    max_concurrent: Optional[int],
    no_deps: bool,
    dry_run: bool,
    username: Optional[str] = None,
    password: Optional[str] = None,
):
    """异步运行"""
    try:
        config = await load_config(config_path, mod_list)
        if download_dir:
            config.download_dir = download_dir
        if max_concurrent:
            config.max_concurrent = max_concurrent
        if no_deps:
            config.with_dependencies = False

        credentials = None
        if username and not dry_run:
            credentials = await login(username, password)
            logger.info(f"已登录: {credentials.username}")

        orchestrator = ModPortalOrchestrator(config, credentials)

        if dry_run:
            try:
                resolved = await orchestrator.resolve()
            finally:
                await orchestrator.client.close()
            logger.info("[干运行模式] 解析结果:")
            for mod in resolved:
                logger.info(
                    f"  {mod.name} {mod.release.version} ({mod.release.file_name})"
                )
            return

        await orchestrator.run()

        stats = orchestrator.get_stats()
        logger.success(f"完成! 处理了 {stats['processed_mods']} 个模组")

        if stats["skipped"]:
            logger.warning(f"跳过了 {len(stats['skipped'])} 个模组")
        if stats["failed"]:
            raise click.ClickException(f"{len(stats['failed'])} 个文件下载失败")

    except ModPortalError as e:
        logger.error(f"错误: {e}")
        raise click.ClickException(str(e))


@click.command()
@click.argument("config", type=click.Path(exists=True), default="mods.yaml")
@click.option(
    "--mod-list",
    type=click.Path(exists=True),
    help="导入 mod-list.json 中启用的模组",
)
@click.option("-o", "--download-dir", help="下载目录（默认为配置中的模组目录）")
@click.option("-j", "--max-concurrent", type=int, help="最大并发数")
@click.option("--no-deps", is_flag=True, help="不下载依赖")
@click.option("--dry-run", is_flag=True, help="干运行模式（只解析版本，不下载）")
@click.option(
    "-u",
    "--username",
    help="门户用户名，设置后提示输入密码并登录（默认读取 FACTORIO_USERNAME / FACTORIO_TOKEN）",
)
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(
    config: str,
    mod_list: Optional[str],
    download_dir: Optional[str],
    max_concurrent: Optional[int],
    no_deps: bool,
    dry_run: bool,
    username: Optional[str],
    debug: bool,
):
    """ModPortal - Factorio 模组下载管理工具"""
    setup_logger(level="DEBUG" if debug else None)

    password = None
    if username and not dry_run:
        password = click.prompt("密码", hide_input=True)

    asyncio.run(
        run_async(
            config,
            mod_list,
            download_dir,
            max_concurrent,
            no_deps,
            dry_run,
            username,
            password,
        )
    )


if __name__ == "__main__":
    main()
