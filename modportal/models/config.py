"""
配置模型

模组列表配置文件的数据类，支持 YAML / TOML / JSON 三种格式共用同一结构：

    Metadata:
      _v: 0.1.0
      FactorioVersion: 1.1.0
      FactorioModFolder: ~/.factorio/mods
    Mods:
      - name: flib
        version: ">=0.12.0"
        enabled: true
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import semantic_version

from modportal.exceptions import ConfigParseError, ConfigValidationError, ParseError
from modportal.models.dependency import parse_version_range


CONFIG_SCHEMA_VERSION = "0.1.0"


def default_mod_folder() -> str:
    """游戏默认的模组目录"""
    return os.path.join(os.path.expanduser("~"), ".factorio", "mods")


@dataclass
class Metadata:
    """配置元数据"""

    version: str = CONFIG_SCHEMA_VERSION
    factorio_version: Optional[str] = None
    factorio_mod_folder: str = field(default_factory=default_mod_folder)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Metadata":
        data = data or {}
        factorio_version = data.get("FactorioVersion")
        if factorio_version is not None:
            try:
                # YAML 会把 1.1 读成浮点数
                factorio_version = str(
                    semantic_version.Version.coerce(str(factorio_version))
                )
            except ValueError as e:
                raise ConfigValidationError(
                    f"FactorioVersion 不是有效的版本号: {factorio_version}",
                    context={"value": factorio_version},
                ) from e

        mod_folder = data.get("FactorioModFolder")
        return cls(
            version=str(data.get("_v", CONFIG_SCHEMA_VERSION)),
            factorio_version=factorio_version,
            factorio_mod_folder=(
                os.path.expanduser(str(mod_folder))
                if mod_folder
                else default_mod_folder()
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"_v": self.version}
        if self.factorio_version is not None:
            data["FactorioVersion"] = self.factorio_version
        data["FactorioModFolder"] = self.factorio_mod_folder
        return data

    @property
    def game_version(self) -> Optional[str]:
        """门户查询使用的主版本号，如 "1.1" """
        if not self.factorio_version:
            return None
        version = semantic_version.Version(self.factorio_version)
        return f"{version.major}.{version.minor}"


@dataclass
class ConfigModEntry:
    """配置中的单个模组"""

    name: str
    version: Optional[semantic_version.SimpleSpec] = None
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigModEntry":
        """
        从配置项构建

        配置项可以是模组名字符串，也可以是包含 name/version/enabled 的字典。
        """
        if isinstance(data, str):
            return cls(name=data)
        if not isinstance(data, dict) or not data.get("name"):
            raise ConfigValidationError(
                "模组配置项缺少 name", context={"entry": repr(data)}
            )

        version = data.get("version")
        # 允许 ">= 1.0.0" 这种与依赖声明相同的带空格写法
        expression = "".join(str(version).split()) if version else ""
        try:
            required = (
                parse_version_range(expression)
                if expression and expression != "*"
                else None
            )
        except ParseError as e:
            raise ConfigValidationError(
                f"模组 {data['name']} 的版本范围无效: {version}",
                context={"entry": data["name"], "version": str(version)},
            ) from e

        return cls(
            name=str(data["name"]),
            version=required,
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version.expression if self.version else "*",
            "enabled": self.enabled,
        }


@dataclass
class ModPortalConfig:
    """完整配置"""

    metadata: Metadata = field(default_factory=Metadata)
    mods: List[ConfigModEntry] = field(default_factory=list)
    download_dir: Optional[str] = None
    max_concurrent: int = 5
    with_dependencies: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "ModPortalConfig":
        """
        从配置字典构建

        Raises:
            ConfigParseError: 顶层结构不是字典
            ConfigValidationError: 字段取值无效
        """
        if not isinstance(data, dict):
            raise ConfigParseError("配置文件顶层必须是映射")

        mods = data.get("Mods") or []
        if not isinstance(mods, list):
            raise ConfigValidationError("Mods 必须是列表")

        max_concurrent = data.get("MaxConcurrent", 5)
        if not isinstance(max_concurrent, int) or max_concurrent <= 0:
            raise ConfigValidationError(
                f"MaxConcurrent 必须是正整数: {max_concurrent}"
            )

        return cls(
            metadata=Metadata.from_dict(data.get("Metadata")),
            mods=[ConfigModEntry.from_dict(entry) for entry in mods],
            download_dir=data.get("DownloadDir"),
            max_concurrent=max_concurrent,
            with_dependencies=bool(data.get("WithDependencies", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "Metadata": self.metadata.to_dict(),
            "Mods": [entry.to_dict() for entry in self.mods],
        }
        if self.download_dir:
            data["DownloadDir"] = self.download_dir
        if self.max_concurrent != 5:
            data["MaxConcurrent"] = self.max_concurrent
        if not self.with_dependencies:
            data["WithDependencies"] = False
        return data

    @property
    def enabled_mods(self) -> List[ConfigModEntry]:
        return [entry for entry in self.mods if entry.enabled]

    @property
    def target_dir(self) -> str:
        """下载目标目录，未配置时使用游戏模组目录"""
        return self.download_dir or self.metadata.factorio_mod_folder

    def add_mod(self, entry: ConfigModEntry) -> bool:
        """添加模组，已存在同名模组时返回 False"""
        if any(existing.name == entry.name for existing in self.mods):
            return False
        self.mods.append(entry)
        return True
