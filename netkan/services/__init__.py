"""
NetKAN 服务层

包含带缓存的下载服务。
"""

from netkan.services.caching_http import CachingHttpService

__all__ = [
    "CachingHttpService",
]
