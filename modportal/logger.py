"""
日志配置

整个项目直接使用 loguru 的全局 logger，这里只负责安装输出目标。
"""

import os
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
DEBUG_ENV = "MODPORTAL_DEBUG"


def _default_level() -> str:
    return "DEBUG" if os.environ.get(DEBUG_ENV) == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stdout,
    colorize: bool = True,
) -> None:
    """
    安装日志输出

    Args:
        level: 日志级别，默认根据 MODPORTAL_DEBUG 环境变量选择 DEBUG 或 INFO
        sink: 控制台输出目标
        colorize: 控制台是否使用颜色
    """
    level = (level or _default_level()).upper()
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink,
        format=LOG_FORMAT,
        level=level,
        colorize=colorize,
        enqueue=True,
        backtrace=debug,
        diagnose=debug,
    )

    logger.debug(f"日志级别: {level}")


__all__ = ["logger", "setup_logger"]
