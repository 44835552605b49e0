"""
完整性校验

门户为每个发布包声明 SHA1（小写十六进制）。下载内容在写盘前整体校验，
已存在的本地文件按块读取后校验。
"""

import hashlib
import os
from typing import Optional

import aiofiles

from modportal.exceptions import IntegrityError


CHUNK_SIZE = 64 * 1024


def _normalize(sha1: str) -> str:
    return sha1.strip().lower()


class FileVerifier:
    """SHA1 校验"""

    @staticmethod
    def calc_sha1_bytes(data: bytes) -> str:
        return hashlib.sha1(data).hexdigest()

    @staticmethod
    def verify_bytes(data: bytes, expected_sha1: str) -> bool:
        """
        校验下载内容

        Args:
            data: 完整的下载内容
            expected_sha1: 门户声明的 SHA1，大小写和首尾空白不敏感
        """
        return FileVerifier.calc_sha1_bytes(data) == _normalize(expected_sha1)

    @staticmethod
    def ensure_bytes(data: bytes, expected_sha1: str, name: str = "") -> None:
        """校验下载内容，不一致时抛出 IntegrityError"""
        expected = _normalize(expected_sha1)
        actual = FileVerifier.calc_sha1_bytes(data)
        if actual == expected:
            return
        raise IntegrityError(
            f"SHA1 校验失败: {name or '<bytes>'}",
            context={"file": name, "expected": expected, "actual": actual},
        )

    @staticmethod
    async def calc_sha1(file_path: str) -> Optional[str]:
        """计算本地文件的 SHA1，文件不存在或无法读取时返回 None"""
        digest = hashlib.sha1()
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    chunk = await f.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    digest.update(chunk)
        except OSError:
            return None
        return digest.hexdigest()

    @staticmethod
    async def verify_sha1(file_path: str, expected_sha1: Optional[str]) -> bool:
        """
        校验本地文件的 SHA1

        没有声明值时视为通过；文件不存在或无法读取时不通过。
        """
        if not expected_sha1:
            return True
        actual = await FileVerifier.calc_sha1(file_path)
        return actual is not None and actual == _normalize(expected_sha1)

    @staticmethod
    async def is_valid(file_path: str, expected_sha1: Optional[str] = None) -> bool:
        """
        检查本地文件是否存在且校验通过

        没有声明 SHA1 时只检查文件是否存在。
        """
        if not os.path.isfile(file_path):
            return False
        return await FileVerifier.verify_sha1(file_path, expected_sha1)


def verify(data: bytes, declared_sha1: str) -> bool:
    """见 FileVerifier.verify_bytes"""
    return FileVerifier.verify_bytes(data, declared_sha1)
