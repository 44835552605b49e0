"""
配置文件读写工具

按后缀选择格式：.toml / .json / .yaml / .yml。
"""

import json
from pathlib import Path

import aiofiles
import toml
import yaml

from modportal.exceptions import ConfigError, ConfigParseError


def config_format(path: str) -> str:
    """根据文件后缀判断配置格式"""
    suffix = Path(path).suffix.lower()
    if suffix == ".toml":
        return "toml"
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    raise ConfigError(f"不支持的配置文件格式: {suffix}", context={"path": path})


def parse_config(text: str, format: str) -> dict:
    """
    解析配置文本

    Raises:
        ConfigParseError: 内容不符合格式
    """
    try:
        if format == "toml":
            return toml.loads(text)
        elif format == "json":
            return json.loads(text)
        elif format == "yaml":
            return yaml.safe_load(text) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"配置文件解析失败: {e}") from e
    raise ConfigError(f"不支持的配置文件格式: {format}")


def dump_config(data: dict, format: str) -> str:
    """将配置字典序列化为文本"""
    if format == "toml":
        return toml.dumps(data)
    elif format == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    elif format == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    raise ConfigError(f"不支持的配置文件格式: {format}")


async def load_config_file(path: str) -> dict:
    """读取本地配置文件"""
    if not Path(path).exists():
        raise ConfigError(f"配置文件不存在: {path}", context={"path": path})
    async with aiofiles.open(path, encoding="utf-8") as f:
        text = await f.read()
    return parse_config(text, config_format(path))


async def save_config_file(path: str, data: dict) -> None:
    """写回本地配置文件"""
    text = dump_config(data, config_format(path))
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)

