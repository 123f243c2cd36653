"""
远程引用

解析 ``$kref`` / ``$vref`` 字段，格式为 ``#/ckan/<source>[/<id>]``。
"""

import re
from dataclasses import dataclass
from typing import Optional

from netkan.exceptions import MetadataError

_REF_PATTERN = re.compile(r"^#/ckan/(?P<source>[^/]+)(?:/(?P<id>.+))?$")


@dataclass(frozen=True)
class RemoteRef:
    """远程引用（元数据托管位置）"""

    source: str
    id: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "RemoteRef":
        match = _REF_PATTERN.match(text)
        if match is None:
            raise MetadataError(
                f"无效的远程引用: {text}", context={"ref": text}
            )
        return cls(source=match.group("source"), id=match.group("id"))

    def __str__(self) -> str:
        if self.id is None:
            return f"#/ckan/{self.source}"
        return f"#/ckan/{self.source}/{self.id}"
