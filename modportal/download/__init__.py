"""
ModPortal 下载层

包含下载管理、任务队列、完整性校验等功能。
"""

from modportal.download.manager import DownloadManager, DownloadStats
from modportal.download.queue import DownloadQueue, Priority
from modportal.download.verifier import FileVerifier, verify

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "DownloadQueue",
    "Priority",
    "FileVerifier",
    "verify",
]
