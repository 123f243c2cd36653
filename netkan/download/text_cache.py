"""
文本缓存

进程内的短期文本缓存，合并短时间内对同一 URL 的重复请求。
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional

from loguru import logger

# 两分钟内复用同一 URL 的响应
DEFAULT_LIFETIME = timedelta(minutes=2)


@dataclass
class TextCacheEntry:
    """文本缓存条目"""

    value: str
    fetched_at: datetime


class ExpiringTextCache:
    """惰性过期的文本缓存"""

    def __init__(
        self,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.lifetime = lifetime
        self._clock = clock
        self._entries: Dict[str, TextCacheEntry] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, url: str) -> Optional[str]:
        """获取未过期的缓存值，过期条目会被清除"""
        entry = self._entries.get(url)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at < self.lifetime:
            return entry.value
        del self._entries[url]
        return None

    def put(self, url: str, value: str) -> None:
        self._entries[url] = TextCacheEntry(value=value, fetched_at=self._clock())

    async def get_or_fetch(
        self, url: str, producer: Callable[[], Awaitable[str]]
    ) -> str:
        """
        获取缓存值，未命中时调用 producer 获取并缓存

        Args:
            url: 缓存键
            producer: 实际发起请求的协程函数

        Returns:
            文本内容
        """
        # 只有同一 URL 的请求互相等待
        lock = self._locks.setdefault(url, asyncio.Lock())
        try:
            async with lock:
                cached = self.get(url)
                if cached is not None:
                    logger.debug(f"[文本缓存] 命中 {url}")
                    return cached
                value = await producer()
                self.put(url, value)
                return value
        finally:
            if not lock.locked() and self._locks.get(url) is lock:
                del self._locks[url]

    def clear(self) -> None:
        self._entries.clear()
        self._locks.clear()

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)
