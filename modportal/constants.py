"""
常量定义

模组门户地址、游戏版本以及游戏自带的模组名称。
"""

from enum import Enum
from typing import Union


MOD_PORTAL_URL = "https://mods.factorio.com"
AUTH_URL = "https://auth.factorio.com/api-login"
ASSETS_URL = "https://assets-mod.factorio.com"

AUTH_API_VERSION = "4"
DEFAULT_PAGE_SIZE = 25

# 随游戏本体发布，门户上不存在
BUILTIN_MODS = frozenset({"base", "core", "space-age", "quality", "elevated-rails"})


class FactorioVersion(Enum):
    """门户支持的游戏主版本"""

    V0_13 = "0.13"
    V0_14 = "0.14"
    V0_15 = "0.15"
    V0_16 = "0.16"
    V0_17 = "0.17"
    V0_18 = "0.18"
    V1_0 = "1.0"
    V1_1 = "1.1"
    V2_0 = "2.0"

    @classmethod
    def parse(cls, text: str) -> Union["FactorioVersion", str]:
        """
        解析游戏版本

        未知版本原样返回字符串，交给服务端判断。
        """
        try:
            return cls(text)
        except ValueError:
            return text

    def __str__(self) -> str:
        return self.value

