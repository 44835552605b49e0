"""
认证服务

下载发布包需要用户名和 token，可从环境变量读取或通过登录接口获取。
"""

import os
from dataclasses import dataclass, field
from typing import Optional

import aiohttp
from loguru import logger

from modportal.constants import AUTH_API_VERSION, AUTH_URL
from modportal.exceptions import AuthError, ConfigError


@dataclass(frozen=True)
class Credentials:
    """门户下载凭据"""

    username: str
    token: str = field(repr=False)

    @classmethod
    def from_env(cls) -> "Credentials":
        """
        从环境变量 FACTORIO_USERNAME / FACTORIO_TOKEN 读取凭据

        Raises:
            ConfigError: 环境变量缺失
        """
        username = os.environ.get("FACTORIO_USERNAME")
        token = os.environ.get("FACTORIO_TOKEN")
        if not username or not token:
            raise ConfigError("请设置环境变量 FACTORIO_USERNAME 和 FACTORIO_TOKEN")
        return cls(username=username, token=token)

    def as_params(self) -> dict:
        return {"username": self.username, "token": self.token}


async def login(
    username: str,
    password: str,
    email_code: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> Credentials:
    """
    使用账号密码登录并获取 token

    Args:
        username: 用户名或邮箱
        password: 密码
        email_code: 邮箱验证码（开启邮箱验证时需要）
        session: 可选的 aiohttp session

    Raises:
        AuthError: 登录失败
    """
    data = {
        "username": username,
        "password": password,
        "api_version": AUTH_API_VERSION,
        "require_game_ownership": "true",
    }
    if email_code:
        data["email_authentication_code"] = email_code

    owned = session is None
    session = session or aiohttp.ClientSession()
    try:
        logger.debug(f"正在登录: {username}")
        async with session.post(AUTH_URL, data=data) as response:
            try:
                payload = await response.json(content_type=None)
            except (ValueError, aiohttp.ContentTypeError):
                # 网关错误页等非 JSON 响应
                payload = None
            if response.status != 200:
                message = "登录失败"
                if isinstance(payload, dict):
                    message = payload.get("message") or payload.get("error") or message
                raise AuthError(message, response=response)
            if payload is None:
                raise AuthError("登录响应不是有效的 JSON", response=response)
    finally:
        if owned:
            await session.close()

    return _credentials_from_payload(username, payload)


def _credentials_from_payload(username: str, payload) -> Credentials:
    # 旧版接口返回 [token]，新版返回 {"username": ..., "token": ...}
    if isinstance(payload, list) and payload:
        return Credentials(username=username, token=str(payload[0]))
    if isinstance(payload, dict) and payload.get("token"):
        return Credentials(
            username=payload.get("username") or username, token=payload["token"]
        )
    raise AuthError("无法识别的登录响应", context={"payload": repr(payload)})
