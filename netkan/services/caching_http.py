"""
带缓存的下载服务

把模组元数据解析为本地文件：优先复用下载缓存，主地址失败时改用
archive.org 镜像，并按文件内容识别格式、校验 ZIP 完整性。
文本请求走独立的短期内存缓存。
"""

import os
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple

from loguru import logger

from netkan.config import NetkanConfig
from netkan.download.cache import ContentStore, NetFileCache
from netkan.download.identifier import FileType, extension_for, identify_file
from netkan.download.net import Net
from netkan.download.text_cache import ExpiringTextCache
from netkan.download.tracker import RequestTracker
from netkan.exceptions import DownloadArchiveError, DownloadError
from netkan.models import Metadata


class CachingHttpService:
    """带缓存的下载服务"""

    def __init__(
        self,
        cache: ContentStore,
        net: Optional[Net] = None,
        overwrite_cache: bool = False,
        text_cache: Optional[ExpiringTextCache] = None,
        tracker: Optional[RequestTracker] = None,
        identify: Callable[[str], FileType] = identify_file,
    ):
        self.cache = cache
        self.net = net or Net()
        self.overwrite_cache = overwrite_cache
        self.text_cache = text_cache if text_cache is not None else ExpiringTextCache()
        self.tracker = tracker if tracker is not None else RequestTracker()
        self._identify = identify

    @classmethod
    def from_config(
        cls, config: NetkanConfig, net: Optional[Net] = None
    ) -> "CachingHttpService":
        """根据配置创建服务"""
        if net is None:
            net = Net(timeout=config.timeout, user_agent=config.user_agent)
        return cls(
            cache=NetFileCache(config.cache_dir),
            net=net,
            overwrite_cache=config.overwrite_cache,
            text_cache=ExpiringTextCache(
                lifetime=timedelta(seconds=config.text_cache_lifetime)
            ),
        )

    async def download_module(self, metadata: Metadata) -> str:
        """
        下载模组文件

        Args:
            metadata: 模组元数据

        Returns:
            缓存中的文件路径

        Raises:
            DownloadError: 主地址和镜像都下载失败
        """
        try:
            return await self._download_package(
                metadata.download, metadata.identifier, metadata.remote_timestamp
            )
        except Exception as primary_error:
            fallback = metadata.fallback_download
            if fallback is None:
                raise
            logger.warning(
                f"[镜像] '{metadata.identifier}' 主地址下载失败 ({primary_error})，"
                f"尝试 {fallback}"
            )
            try:
                return await self._download_package(
                    fallback, metadata.identifier, metadata.remote_timestamp
                )
            except Exception as fallback_error:
                logger.debug(f"[镜像] {fallback} 下载失败: {fallback_error}")
                raise primary_error

    async def _download_package(
        self,
        url: Optional[str],
        identifier: Optional[str],
        updated: Optional[datetime],
    ) -> str:
        if not url:
            raise DownloadError(
                f"'{identifier}' 没有下载地址", context={"identifier": identifier}
            )

        # 命令行要求覆盖缓存时，每个 URL 在本次运行中只丢弃一次
        if self.overwrite_cache and url not in self.tracker:
            logger.debug(f"[缓存] 丢弃 {url} 的缓存")
            await self.cache.remove(url)

        self.tracker.add(url)

        cached_file = await self.cache.get_cached_filename(url, updated)
        if cached_file:
            logger.debug(f"[缓存] 命中 {url}")
            return cached_file

        downloaded_file = await self.net.download(url)
        try:
            extension = self._check_file(url, downloaded_file)
            return await self.cache.store(
                url,
                downloaded_file,
                f"netkan-{identifier}.{extension}",
                move=True,
            )
        finally:
            if os.path.exists(downloaded_file):
                os.remove(downloaded_file)

    def _check_file(self, url: str, path: str) -> str:
        """识别文件格式并返回扩展名，ZIP 损坏时抛出异常"""
        file_type = self._identify(path)
        logger.debug(f"[识别] {url}: {file_type.value}")
        if file_type is FileType.ZIP:
            valid, reason = self.cache.zip_valid(path)
            if not valid:
                logger.debug(f"{path} is not a valid ZIP file: {reason}")
                raise DownloadArchiveError(
                    f"{url} is not a valid ZIP file: {reason}",
                    reason=reason,
                    context={"url": url},
                )
        return extension_for(file_type)

    async def download_text(
        self,
        url: str,
        auth_token: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> str:
        """
        下载文本，两分钟内重复请求同一 URL 直接返回缓存

        Args:
            url: 请求地址
            auth_token: 可选的访问令牌
            mime_type: 可选的 Accept 类型
        """
        return await self.text_cache.get_or_fetch(
            url, lambda: self.net.download_text(url, auth_token, mime_type)
        )

    @property
    def requested_urls(self) -> Tuple[str, ...]:
        """本次运行请求过的下载地址"""
        return self.tracker.urls

    def clear_requested_urls(self) -> None:
        self.tracker.clear()

    async def close(self):
        await self.net.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
