"""
模组元数据

对原始元数据记录（.netkan / .ckan 的 JSON 对象）的只读视图，
只暴露驱动下载和缓存所需的字段。
"""

import copy
from datetime import datetime
from typing import Any, Dict, Optional

from netkan.exceptions import MetadataError
from netkan.models.remote_ref import RemoteRef
from netkan.models.version import SPEC_VERSION_V1, ModuleVersion

KREF_PROPERTY = "$kref"
VREF_PROPERTY = "$vref"
SPEC_VERSION_PROPERTY = "spec_version"
VERSION_PROPERTY = "version"
DOWNLOAD_PROPERTY = "download"
DOWNLOAD_HASH_PROPERTY = "download_hash"
UPDATED_PROPERTY = "x_netkan_asset_updated"
STAGED_PROPERTY = "x_netkan_staging"
STAGING_REASON_PROPERTY = "x_netkan_staging_reason"

ARCHIVE_URL_TEMPLATE = (
    "https://archive.org/download/{identifier}-{version}/"
    "{prefix}-{identifier}-{version}.zip"
)
HASH_PREFIX_LENGTH = 8


def fallback_download_url(
    identifier: Optional[str],
    version: Optional[ModuleVersion],
    download_hash: Any,
) -> Optional[str]:
    """
    构造 archive.org 镜像地址

    Args:
        identifier: 模组标识
        version: 模组版本
        download_hash: 记录中的 download_hash 对象

    Returns:
        镜像 URL，缺少任一必要字段时返回 None
    """
    if not identifier or version is None:
        return None
    if not isinstance(download_hash, dict):
        return None
    sha1 = download_hash.get("sha1")
    if not isinstance(sha1, str) or len(sha1) < HASH_PREFIX_LENGTH:
        return None

    ver = str(version).replace(":", "-")
    return ARCHIVE_URL_TEMPLATE.format(
        identifier=identifier,
        version=ver,
        prefix=sha1[:HASH_PREFIX_LENGTH],
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """解析远程修改时间，失败时返回 None"""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_ref(json: Dict[str, Any], name: str) -> Optional[RemoteRef]:
    if name not in json:
        return None
    token = json[name]
    if not isinstance(token, str):
        raise MetadataError(f"{name} must be a string.", context={"field": name})
    return RemoteRef.parse(token)


def _parse_spec_version(json: Dict[str, Any]) -> ModuleVersion:
    if SPEC_VERSION_PROPERTY not in json:
        raise MetadataError(
            f"{SPEC_VERSION_PROPERTY} must be specified.",
            context={"field": SPEC_VERSION_PROPERTY},
        )
    token = json[SPEC_VERSION_PROPERTY]
    # bool 是 int 的子类，需要排除
    if isinstance(token, int) and not isinstance(token, bool) and token == 1:
        return SPEC_VERSION_V1
    if isinstance(token, str):
        return ModuleVersion(token)
    raise MetadataError(
        f'Could not parse {SPEC_VERSION_PROPERTY}: "{token}"',
        context={"field": SPEC_VERSION_PROPERTY, "value": token},
    )


class Metadata:
    """模组元数据视图"""

    def __init__(self, json: Dict[str, Any]):
        if json is None:
            raise MetadataError("元数据不能为空")
        if not isinstance(json, dict):
            raise MetadataError(
                "元数据必须是 JSON 对象", context={"type": type(json).__name__}
            )

        self._json = copy.deepcopy(json)

        self.kref = _parse_ref(self._json, KREF_PROPERTY)
        self.vref = _parse_ref(self._json, VREF_PROPERTY)
        self.spec_version = _parse_spec_version(self._json)

        self.version: Optional[ModuleVersion] = None
        if VERSION_PROPERTY in self._json:
            version = self._json[VERSION_PROPERTY]
            if not isinstance(version, str):
                raise MetadataError(
                    f"{VERSION_PROPERTY} must be a string.",
                    context={"field": VERSION_PROPERTY},
                )
            self.version = ModuleVersion(version)

        self.download: Optional[str] = None
        if DOWNLOAD_PROPERTY in self._json:
            download = self._json[DOWNLOAD_PROPERTY]
            if not isinstance(download, str):
                raise MetadataError(
                    f"{DOWNLOAD_PROPERTY} must be a string.",
                    context={"field": DOWNLOAD_PROPERTY},
                )
            self.download = download

        staged = self._json.get(STAGED_PROPERTY, False)
        if not isinstance(staged, bool):
            raise MetadataError(
                f"{STAGED_PROPERTY} must be a boolean.",
                context={"field": STAGED_PROPERTY},
            )
        self.staged = staged
        reason = self._json.get(STAGING_REASON_PROPERTY)
        self.staging_reason: Optional[str] = None if reason is None else str(reason)

        self.remote_timestamp = _parse_timestamp(self._json.get(UPDATED_PROPERTY))

        self._fallback_download = fallback_download_url(
            self.identifier, self.version, self._json.get(DOWNLOAD_HASH_PROPERTY)
        )

    @property
    def identifier(self) -> Optional[str]:
        identifier = self._json.get("identifier")
        return identifier if isinstance(identifier, str) else None

    @property
    def fallback_download(self) -> Optional[str]:
        """archive.org 镜像地址"""
        return self._fallback_download

    def json(self) -> Dict[str, Any]:
        """返回原始记录的独立副本"""
        return copy.deepcopy(self._json)

    def __repr__(self) -> str:
        return f"Metadata(identifier={self.identifier!r}, version={self.version!r})"
