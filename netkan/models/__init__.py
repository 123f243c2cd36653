"""
NetKAN 数据模型包

包含元数据视图、远程引用和版本号定义。
"""

from netkan.models.metadata import Metadata, fallback_download_url
from netkan.models.remote_ref import RemoteRef
from netkan.models.version import SPEC_VERSION_V1, ModuleVersion

__all__ = [
    "Metadata",
    "fallback_download_url",
    "RemoteRef",
    "ModuleVersion",
    "SPEC_VERSION_V1",
]
