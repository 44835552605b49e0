"""
ModPortal - Factorio 模组门户客户端

依赖声明解析、版本匹配、发布版本选择与下载校验。
"""

__version__ = "0.1.0"

from modportal.models import DependencyPrefix, DependencySpec, ReleaseRecord
from modportal.services import ModPortalClient, matches, select_best
from modportal.download import verify

__all__ = [
    "__version__",
    "DependencyPrefix",
    "DependencySpec",
    "ReleaseRecord",
    "ModPortalClient",
    "matches",
    "select_best",
    "verify",
]
