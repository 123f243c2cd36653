"""
请求记录

记录本次运行中请求过的 URL，用于“每个 URL 只强制刷新一次”。
"""

from typing import Dict, Tuple


class RequestTracker:
    """已请求 URL 集合（保持插入顺序）"""

    def __init__(self):
        self._urls: Dict[str, None] = {}

    def add(self, url: str) -> None:
        """记录 URL，重复记录不改变顺序"""
        self._urls.setdefault(url, None)

    @property
    def urls(self) -> Tuple[str, ...]:
        return tuple(self._urls)

    def clear(self) -> None:
        self._urls.clear()

    def __contains__(self, url: str) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)
