"""
下载缓存

持久化的文件缓存，以来源 URL 为键保存已下载的模组文件。
"""

import os
import re
import shutil
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from loguru import logger

from netkan.download.verifier import FileVerifier
from netkan.exceptions import DownloadFileError

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class ContentStore(ABC):
    """持久化内容存储接口"""

    @abstractmethod
    async def get_cached_filename(
        self, url: str, remote_timestamp: Optional[datetime] = None
    ) -> Optional[str]:
        """
        查找 URL 对应的有效缓存文件，没有则返回 None。
        """

    @abstractmethod
    async def remove(self, url: str) -> None:
        """
        删除 URL 对应的缓存文件，不存在时不做任何事。
        """

    @abstractmethod
    async def store(
        self, url: str, path: str, description: str, move: bool = False
    ) -> str:
        """
        将文件存入缓存，返回缓存中的最终路径。
        """

    @abstractmethod
    def zip_valid(self, path: str) -> Tuple[bool, str]:
        """
        检查 ZIP 文件完整性，返回 (是否有效, 原因)。
        """


class NetFileCache(ContentStore):
    """基于目录的下载缓存"""

    def __init__(self, cache_dir: str):
        self.cache_dir = os.path.abspath(cache_dir)
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            raise DownloadFileError(
                f"无法创建缓存目录: {self.cache_dir}",
                context={"cache_dir": self.cache_dir, "error": str(e)},
            )

    def _entries(self, url: str) -> List[str]:
        prefix = FileVerifier.url_hash(url) + "-"
        try:
            names = os.listdir(self.cache_dir)
        except OSError as e:
            raise DownloadFileError(
                f"无法读取缓存目录: {self.cache_dir}",
                context={"cache_dir": self.cache_dir, "error": str(e)},
            )
        return sorted(
            os.path.join(self.cache_dir, name)
            for name in names
            if name.startswith(prefix)
        )

    @staticmethod
    def _is_fresh(path: str, remote_timestamp: Optional[datetime]) -> bool:
        if remote_timestamp is None:
            return True
        mtime = os.path.getmtime(path)
        if remote_timestamp.tzinfo is None:
            modified = datetime.fromtimestamp(mtime)
        else:
            modified = datetime.fromtimestamp(mtime, tz=timezone.utc)
        return remote_timestamp < modified

    async def get_cached_filename(
        self, url: str, remote_timestamp: Optional[datetime] = None
    ) -> Optional[str]:
        for path in self._entries(url):
            if os.path.isfile(path) and self._is_fresh(path, remote_timestamp):
                return path
        return None

    async def remove(self, url: str) -> None:
        for path in self._entries(url):
            try:
                os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                raise DownloadFileError(
                    f"无法删除缓存文件: {path}",
                    context={"url": url, "file": path, "error": str(e)},
                )
            logger.debug(f"[缓存] 已删除 {os.path.basename(path)}")

    async def store(
        self, url: str, path: str, description: str, move: bool = False
    ) -> str:
        """
        存入缓存

        Args:
            url: 来源 URL
            path: 待缓存的文件
            description: 展示用文件名
            move: True 时移动文件，否则复制

        Returns:
            缓存文件路径
        """
        await self.remove(url)

        safe_description = _INVALID_FILENAME_CHARS.sub("-", description)
        target = os.path.join(
            self.cache_dir, f"{FileVerifier.url_hash(url)}-{safe_description}"
        )
        try:
            if move:
                shutil.move(path, target)
            else:
                shutil.copy2(path, target)
        except OSError as e:
            raise DownloadFileError(
                f"无法写入缓存: {safe_description}",
                context={"url": url, "file": path, "error": str(e)},
            )
        # 以存入时间作为缓存的新鲜度
        os.utime(target, None)
        logger.debug(f"[缓存] 已存入 {os.path.basename(target)}")
        return target

    def zip_valid(self, path: str) -> Tuple[bool, str]:
        return FileVerifier.zip_valid(path)
