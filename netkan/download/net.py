"""
网络下载

基于 aiohttp 的文件与文本下载。
"""

import asyncio
import os
import tempfile
from typing import Optional

import aiofiles
import aiohttp
from loguru import logger

from netkan import __version__
from netkan.exceptions import DownloadNetworkError

DEFAULT_USER_AGENT = f"netkan/{__version__}"


class Net:
    """网络下载客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 60.0,
        user_agent: str = DEFAULT_USER_AGENT,
        temp_dir: Optional[str] = None,
    ):
        self._session = session
        self._owned_session = session is None
        self.timeout = timeout
        self.user_agent = user_agent
        self.temp_dir = temp_dir

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def download(self, url: str) -> str:
        """
        下载文件到临时目录

        Args:
            url: 下载地址

        Returns:
            临时文件路径
        """
        fd, temp_path = tempfile.mkstemp(prefix="netkan-", dir=self.temp_dir)
        os.close(fd)

        logger.debug(f"[下载] {url}")
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}: {url}",
                        context={"url": url, "status": response.status},
                    )
                async with aiofiles.open(temp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(8192):
                        await f.write(chunk)
        except DownloadNetworkError:
            os.remove(temp_path)
            raise
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            os.remove(temp_path)
            raise DownloadNetworkError(
                f"下载失败: {url}", context={"url": url, "error": str(e)}
            ) from e

        return temp_path

    async def download_text(
        self,
        url: str,
        auth_token: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> str:
        """
        下载文本内容

        Args:
            url: 请求地址
            auth_token: 可选的访问令牌
            mime_type: 可选的 Accept 类型

        Returns:
            响应文本
        """
        headers = {}
        if auth_token:
            headers["Authorization"] = f"token {auth_token}"
        if mime_type:
            headers["Accept"] = mime_type

        logger.debug(f"[请求] {url}")
        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status != 200:
                    raise DownloadNetworkError(
                        f"HTTP {response.status}: {url}",
                        context={"url": url, "status": response.status},
                    )
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadNetworkError(
                f"请求失败: {url}", context={"url": url, "error": str(e)}
            ) from e

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
