"""
下载任务队列

按优先级出队，同一优先级先进先出；同名发布包只会入队一次。
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Set

from modportal.models import ReleaseRecord


class Priority(IntEnum):
    """下载优先级，数值越小越先下载"""

    HIGH = 0
    NORMAL = 1
    LOW = 2


@dataclass(order=True)
class DownloadTask:
    priority: int
    sequence: int
    name: str = field(compare=False)
    release: ReleaseRecord = field(compare=False)
    download_dir: str = field(compare=False)

    @property
    def filename(self) -> str:
        return self.release.file_name


class DownloadQueue:
    """asyncio.PriorityQueue 的包装，按发布包文件名去重"""

    def __init__(self):
        self._queue: "asyncio.PriorityQueue[DownloadTask]" = asyncio.PriorityQueue()
        self._seen: Set[str] = set()
        self._counter = itertools.count()

    async def put(
        self,
        name: str,
        release: ReleaseRecord,
        download_dir: str,
        priority: Priority = Priority.NORMAL,
    ) -> bool:
        """
        加入下载任务

        Returns:
            是否新加入；同名文件已在队列中时返回 False
        """
        if release.file_name in self._seen:
            return False
        self._seen.add(release.file_name)

        await self._queue.put(
            DownloadTask(
                priority=int(priority),
                sequence=next(self._counter),
                name=name,
                release=release,
                download_dir=download_dir,
            )
        )
        return True

    async def get(self) -> DownloadTask:
        return await self._queue.get()

    def task_done(self):
        self._queue.task_done()

    async def join(self):
        await self._queue.join()
