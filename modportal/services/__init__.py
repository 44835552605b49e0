"""
ModPortal 服务层

包含业务逻辑服务：API 客户端、认证、模组解析、依赖处理、版本匹配与选择。
"""

from modportal.services.api_client import ModPortalClient
from modportal.services.auth import Credentials, login
from modportal.services.mod_resolver import ModResolver, ResolvedMod
from modportal.services.dependency_resolver import DependencyResolver
from modportal.services.version_matcher import VersionMatcher, matches
from modportal.services.release_selector import ReleaseSelector, select_best

__all__ = [
    "ModPortalClient",
    "Credentials",
    "login",
    "ModResolver",
    "ResolvedMod",
    "DependencyResolver",
    "VersionMatcher",
    "matches",
    "ReleaseSelector",
    "select_best",
]
