"""
游戏 mod-list.json 模型
"""

import json
from dataclasses import dataclass, field
from typing import List

import aiofiles

from modportal.exceptions import ConfigParseError


@dataclass
class ModListEntry:
    name: str
    enabled: bool = True


@dataclass
class ModList:
    """游戏目录下 mod-list.json 的内容"""

    mods: List[ModListEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ModList":
        try:
            return cls(
                mods=[
                    ModListEntry(name=m["name"], enabled=bool(m.get("enabled", True)))
                    for m in data.get("mods", [])
                ]
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigParseError(f"mod-list.json 格式错误: {e}") from e

    def to_dict(self) -> dict:
        return {"mods": [{"name": m.name, "enabled": m.enabled} for m in self.mods]}

    @classmethod
    async def load(cls, path: str) -> "ModList":
        """读取 mod-list.json"""
        async with aiofiles.open(path, encoding="utf-8") as f:
            content = await f.read()
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigParseError(
                f"mod-list.json 不是有效的 JSON: {e}", context={"path": path}
            ) from e
        return cls.from_dict(data)

    async def save(self, path: str) -> None:
        """写回 mod-list.json"""
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(self.to_dict(), indent=2))

    @property
    def enabled_names(self) -> List[str]:
        return [m.name for m in self.mods if m.enabled]
