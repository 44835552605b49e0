"""
API 客户端

封装模组门户的查询与下载接口。
"""

import asyncio
from typing import AsyncIterator, Optional, Sequence, Union
from urllib.parse import quote

import aiohttp
from loguru import logger

from modportal.constants import (
    DEFAULT_PAGE_SIZE,
    MOD_PORTAL_URL,
    FactorioVersion,
)
from modportal.exceptions import (
    APIError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
    DownloadNetworkError,
)
from modportal.models import ModDetail, ModPage, ModSummary
from modportal.services.auth import Credentials


def _raise_for_status(response: aiohttp.ClientResponse, what: str) -> None:
    if response.status == 200:
        return
    if response.status == 404:
        raise APINotFoundError(f"{what} 不存在", response=response)
    if response.status == 429:
        raise APIRateLimitError("API 请求过于频繁", response=response)
    if response.status >= 500:
        raise APIServerError(
            f"服务器错误 (状态码: {response.status})", response=response
        )
    raise APIError(f"API 请求失败 (状态码: {response.status})", response=response)


class ModPortalClient:
    """模组门户 API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MOD_PORTAL_URL,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url.rstrip("/")

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api/mods"

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _request(
        self, endpoint: str, params: Optional[dict] = None, what: str = "资源"
    ) -> dict:
        """发送 API 请求并返回 JSON"""
        logger.debug(f"GET {endpoint} {params or ''}")
        async with self.session.get(endpoint, params=params) as response:
            _raise_for_status(response, what)
            return await response.json()

    async def fetch_mod_summary(self, name: str) -> ModSummary:
        """获取模组摘要（带 latest_release）"""
        data = await self._request(
            f"{self.api_url}/{quote(name)}", what=f"模组 {name}"
        )
        return ModSummary.from_api(data)

    async def fetch_mod_detail(self, name: str) -> ModDetail:
        """获取模组完整信息（带全部发布历史）"""
        data = await self._request(
            f"{self.api_url}/{quote(name)}/full", what=f"模组 {name}"
        )
        return ModDetail.from_api(data)

    async def fetch_mod_page(
        self,
        page: int = 1,
        version_filter: Union[FactorioVersion, str, None] = None,
        page_size: Union[int, str] = DEFAULT_PAGE_SIZE,
        namelist: Optional[Sequence[str]] = None,
        hide_deprecated: bool = False,
    ) -> ModPage:
        """
        获取一页模组列表

        Args:
            page: 页码，从 1 开始
            version_filter: 只返回支持该游戏版本的模组
            page_size: 每页数量，"max" 表示一次返回全部
            namelist: 只返回指定名称的模组（此时结果带 releases）
            hide_deprecated: 隐藏已弃用的模组
        """
        params = {"page": str(page), "page_size": str(page_size)}
        if version_filter is not None:
            params["version"] = str(version_filter)
        if namelist:
            params["namelist"] = ",".join(namelist)
        if hide_deprecated:
            params["hide_deprecated"] = "true"

        data = await self._request(self.api_url, params, what="模组列表")
        return ModPage.from_api(data)

    async def iter_mods(
        self,
        version_filter: Union[FactorioVersion, str, None] = None,
        page_size: Union[int, str] = DEFAULT_PAGE_SIZE,
    ) -> AsyncIterator[ModSummary]:
        """按页遍历全部模组"""
        page = 1
        while True:
            result = await self.fetch_mod_page(page, version_filter, page_size)
            for summary in result.results:
                yield summary
            if not result.pagination.has_next or not result.results:
                break
            page += 1

    async def download_release(self, url: str, credentials: Credentials) -> bytes:
        """
        下载发布包

        Args:
            url: 发布记录中的 download_url（相对路径）或完整 URL
            credentials: 下载凭据

        Returns:
            完整的压缩包内容
        """
        full_url = url if url.startswith("http") else f"{self.base_url}{url}"
        try:
            async with self.session.get(
                full_url, params=credentials.as_params()
            ) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}",
                        context={"url": full_url, "status": response.status},
                    )
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadNetworkError(
                f"下载失败: {e}", context={"url": full_url}
            ) from e

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
