"""测试公共夹具"""

import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from modportal.exceptions import APINotFoundError
from modportal.models import (
    InfoJson,
    ModDetail,
    ModSummary,
    ReleaseRecord,
    parse_version_token,
)


BASE_TIME = datetime(2020, 5, 24, 19, 15, 48, tzinfo=timezone.utc)


def make_release(
    version: str,
    days: int = 0,
    data: bytes = b"",
    name: str = "flib",
    dependencies=(),
    factorio_version=None,
) -> ReleaseRecord:
    """构造一个发布版本，released_at 为 BASE_TIME 之后第 days 天"""
    return ReleaseRecord(
        version=parse_version_token(version),
        download_url=f"/download/{name}/{version}",
        file_name=f"{name}_{version}.zip",
        released_at=BASE_TIME + timedelta(days=days),
        sha1=hashlib.sha1(data).hexdigest(),
        info_json=InfoJson.from_api(
            {"dependencies": list(dependencies), "factorio_version": factorio_version}
        ),
    )


@pytest.fixture
def release_factory():
    return make_release


@pytest.fixture
def summary_payload():
    """单个模组查询的返回内容"""
    return {
        "category": "content",
        "downloads_count": 15,
        "name": "015_like_infinite_research",
        "owner": "marshkip",
        "releases": [
            {
                "download_url": "/download/015_like_infinite_research/5a5f1ae6adcc441024d72e0e",
                "file_name": "015_like_infinite_research_0.1.0.zip",
                "info_json": {"factorio_version": "0.14"},
                "released_at": "2016-11-11T07:07:22.473000Z",
                "sha1": "7529aeeba5382daa08fc6c907924eb0783119a22",
                "version": "0.1.0",
            }
        ],
        "summary": "add (almost) infinite research like planned in 0.15.",
        "thumbnail": "/assets/84109a73b35230d21599ed5939d01090329ee5b6.thumb.png",
        "title": "infinite research (0.15 like)",
    }


@pytest.fixture
def release_payload():
    return {
        "download_url": "/download/flib/5ecac7e44d121d000cd77c76",
        "file_name": "flib_0.1.0.zip",
        "info_json": {
            "dependencies": ["base >= 0.18.19"],
            "factorio_version": "0.18",
        },
        "released_at": "2020-05-24T19:15:48.520000Z",
        "sha1": "55f7bbcfc0c0e831008b57c321db509bf3a25285",
        "version": "0.1.0",
    }


class FakeResponse:
    """模拟 aiohttp 响应"""

    def __init__(self, status=200, payload=None, body=b"", url="https://example.test"):
        self.status = status
        self._payload = payload
        self._body = body
        self.url = url

    async def json(self, content_type="application/json"):
        return self._payload

    async def read(self):
        return self._body

    async def text(self):
        return self._body.decode()


class _RequestContext:
    def __init__(self, response):
        self._response = response

    async def __aenter__(self):
        return self._response

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """按 URL 返回预设响应的 aiohttp session 替身"""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []
        self.closed = False

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses[url]
        response.url = url
        return _RequestContext(response)

    def get(self, url, params=None, **kwargs):
        return self._respond("GET", url, params=params, **kwargs)

    def post(self, url, data=None, **kwargs):
        return self._respond("POST", url, data=data, **kwargs)

    async def close(self):
        self.closed = True


class FakePortal:
    """内存中的模组门户，实现 ModPortalClient 的查询接口"""

    def __init__(self, mods):
        # name -> [ReleaseRecord, ...]，按发布顺序排列
        self.mods = mods
        self.summary_calls = []
        self.detail_calls = []

    async def fetch_mod_summary(self, name):
        self.summary_calls.append(name)
        if name not in self.mods:
            raise APINotFoundError(f"模组 {name} 不存在")
        releases = self.mods[name]
        return ModSummary(
            name=name,
            owner="tester",
            title=name.title(),
            latest_release=releases[-1] if releases else None,
        )

    async def fetch_mod_detail(self, name):
        self.detail_calls.append(name)
        if name not in self.mods:
            raise APINotFoundError(f"模组 {name} 不存在")
        return ModDetail(
            name=name,
            owner="tester",
            title=name.title(),
            releases=tuple(self.mods[name]),
        )
