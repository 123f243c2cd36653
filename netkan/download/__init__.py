"""
NetKAN 下载层

包含网络下载、文件类型识别、完整性校验、下载缓存和文本缓存。
"""

from netkan.download.cache import ContentStore, NetFileCache
from netkan.download.identifier import FileType, extension_for, identify_file
from netkan.download.net import Net
from netkan.download.text_cache import ExpiringTextCache, TextCacheEntry
from netkan.download.tracker import RequestTracker
from netkan.download.verifier import FileVerifier

__all__ = [
    "ContentStore",
    "NetFileCache",
    "FileType",
    "extension_for",
    "identify_file",
    "Net",
    "ExpiringTextCache",
    "TextCacheEntry",
    "RequestTracker",
    "FileVerifier",
]
