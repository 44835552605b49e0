"""
下载管理器

固定数量的工作协程从优先级队列中取任务：下载、校验、写盘。
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Dict, List

import aiofiles
from loguru import logger

from modportal.download.queue import DownloadQueue, DownloadTask, Priority
from modportal.download.verifier import FileVerifier
from modportal.exceptions import DownloadError, DownloadFileError
from modportal.models import ReleaseRecord
from modportal.services.api_client import ModPortalClient
from modportal.services.auth import Credentials


@dataclass
class DownloadStats:
    total: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """
    下载管理器

    单个任务失败不影响其他任务，失败原因通过 get_failed() 查看。
    校验失败的内容不会写盘，也不会重新下载。
    """

    def __init__(
        self,
        client: ModPortalClient,
        credentials: Credentials,
        max_concurrent: int = 5,
    ):
        self.client = client
        self.credentials = credentials
        self.max_concurrent = max_concurrent
        self.queue = DownloadQueue()
        self.stats = DownloadStats()
        self._workers: List[asyncio.Task] = []
        self._failed: Dict[str, Exception] = {}

    async def enqueue(
        self,
        name: str,
        release: ReleaseRecord,
        download_dir: str,
        priority: Priority = Priority.NORMAL,
    ) -> bool:
        if not await self.queue.put(name, release, download_dir, priority):
            logger.debug(f"[队列] '{release.file_name}' 已在队列中")
            return False
        self.stats.total += 1
        logger.debug(f"[队列] '{release.file_name}' 已加入 (优先级 {priority.name})")
        return True

    async def fetch(self, release: ReleaseRecord) -> bytes:
        """
        下载发布包并校验 SHA1

        Raises:
            DownloadNetworkError: 网络错误或非 200 响应
            IntegrityError: SHA1 不一致
        """
        data = await self.client.download_release(
            release.download_url, self.credentials
        )
        self.stats.bytes_downloaded += len(data)
        FileVerifier.ensure_bytes(data, release.sha1, release.file_name)
        return data

    async def download_release(self, release: ReleaseRecord, download_dir: str) -> str:
        """
        下载发布包到目录，已存在且校验通过的文件直接跳过

        Returns:
            文件路径
        """
        path = os.path.join(download_dir, release.file_name)
        if await FileVerifier.is_valid(path, release.sha1):
            self.stats.skipped += 1
            logger.info(f"[跳过] '{release.file_name}' 已存在且校验通过")
            return path

        logger.info(f"[开始] {release.file_name}")
        data = await self.fetch(release)

        try:
            os.makedirs(download_dir, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise DownloadFileError(
                f"写入文件失败: {path}", context={"path": path, "error": str(e)}
            ) from e

        self.stats.completed += 1
        logger.success(
            f"[完成] '{release.file_name}' ({len(data) / (1024 * 1024):.2f} MB)"
        )
        return path

    async def _handle(self, task: DownloadTask):
        try:
            await self.download_release(task.release, task.download_dir)
        except DownloadError as e:
            self._record_failure(task, e)
            logger.error(f"[错误] {task.name}: {e}")
        except Exception as e:
            # 意外错误同样只记为该任务失败，工作协程继续取任务
            self._record_failure(task, e)
            logger.exception(f"[错误] {task.name}: 意外错误 {e!r}")

    def _record_failure(self, task: DownloadTask, error: Exception):
        self.stats.failed += 1
        self._failed[task.filename] = error

    async def _worker(self):
        while True:
            task = await self.queue.get()
            try:
                await self._handle(task)
            finally:
                self.queue.task_done()

    async def start(self):
        logger.info(f"[启动] 下载器启动，最大并发数: {self.max_concurrent}")
        self._workers = [
            asyncio.create_task(self._worker()) for _ in range(self.max_concurrent)
        ]

    async def stop(self):
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    async def run(self):
        """启动工作协程并等待队列清空"""
        await self.start()
        try:
            await self.queue.join()
        finally:
            await self.stop()

    def get_stats(self) -> DownloadStats:
        return self.stats

    def get_failed(self) -> Dict[str, Exception]:
        """文件名 -> 失败原因"""
        return dict(self._failed)
