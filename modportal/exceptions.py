"""
ModPortal 异常

所有异常都继承自 ModPortalError，带有错误代码和上下文，
可以通过 to_dict() 输出给调用方。

错误代码分段：
    E1xx 配置
    E2xx / E4xx / E5xx 门户 API
    E3xx 下载
    E6xx 依赖声明与版本号
"""

from typing import Any, Dict, Optional

import aiohttp


class ModPortalError(Exception):
    """基础异常"""

    default_code = "E000"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.context = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": True,
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.code else self.message


# 配置


class ConfigError(ModPortalError):
    """配置文件缺失、格式不支持或缺少凭据"""

    default_code = "E100"


class ConfigParseError(ConfigError):
    default_code = "E101"


class ConfigValidationError(ConfigError):
    """配置内容能解析，但取值无效"""

    default_code = "E102"


# 门户 API


class APIError(ModPortalError):
    """门户返回了非 200 状态码"""

    default_code = "E200"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context.update(status_code=response.status, url=str(response.url))

    @property
    def status(self) -> Optional[int]:
        return self.context.get("status_code")


class AuthError(APIError):
    default_code = "E201"


class APINotFoundError(APIError):
    default_code = "E404"


class APIRateLimitError(APIError):
    default_code = "E429"


class APIServerError(APIError):
    default_code = "E500"


# 下载


class DownloadError(ModPortalError):
    default_code = "E300"


class DownloadNetworkError(DownloadError):
    default_code = "E301"


class IntegrityError(DownloadError):
    """下载内容的 SHA1 与声明值不一致"""

    default_code = "E302"


class DownloadFileError(DownloadError):
    """写入本地文件失败"""

    default_code = "E303"


# 依赖声明与版本号


class ParseError(ModPortalError):
    """依赖声明或版本范围无法解析"""

    default_code = "E600"


class InvalidPrefixError(ParseError):
    default_code = "E601"


class VersionError(ModPortalError):
    """
    非语义化版本号无法比较

    只有 "0.0." 开头的旧式版本号可以改写后参与比较，其余情况直接报错。
    """

    default_code = "E602"


__all__ = [
    "ModPortalError",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "APIError",
    "AuthError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIServerError",
    "DownloadError",
    "DownloadNetworkError",
    "IntegrityError",
    "DownloadFileError",
    "ParseError",
    "InvalidPrefixError",
    "VersionError",
]
