"""
模组版本

只负责解析 ``[epoch:]version`` 格式，不做版本比较。
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from netkan.exceptions import MetadataError

_VERSION_PATTERN = re.compile(r"^(?:(?P<epoch>[0-9]+):)?(?P<version>.+)$", re.DOTALL)


@dataclass(frozen=True)
class ModuleVersion:
    """模组版本号，保留原始文本"""

    raw: str
    epoch: Optional[int] = field(init=False, compare=False)
    version: str = field(init=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.raw, str):
            raise MetadataError(
                f"版本号必须是字符串: {self.raw!r}", context={"version": self.raw}
            )
        match = _VERSION_PATTERN.match(self.raw)
        if match is None:
            raise MetadataError(
                f"无法解析版本号: {self.raw!r}", context={"version": self.raw}
            )
        epoch = match.group("epoch")
        object.__setattr__(self, "epoch", int(epoch) if epoch is not None else None)
        object.__setattr__(self, "version", match.group("version"))

    def __str__(self) -> str:
        return self.raw


# 旧式 spec_version = 1 对应的版本
SPEC_VERSION_V1 = ModuleVersion("v1.0")
