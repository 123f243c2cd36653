"""
文件类型识别

根据文件内容（而非文件名）判断下载文件的真实格式。
"""

import gzip
import zlib
from enum import Enum

GZIP_MAGIC = b"\x1f\x8b"
ZIP_MAGIC = b"PK\x03\x04"
TAR_MAGIC = b"ustar"
TAR_MAGIC_OFFSET = 257
# 判断 tar 头只需要第一个 512 字节的块
TAR_HEADER_SIZE = 512


class FileType(Enum):
    """文件类型"""

    ASCII = "ascii"
    GZIP = "gzip"
    TAR = "tar"
    TAR_GZ = "tar.gz"
    ZIP = "zip"
    UNKNOWN = "unknown"


# 文件类型对应的缓存扩展名
EXTENSIONS = {
    FileType.ASCII: "txt",
    FileType.GZIP: "gz",
    FileType.TAR: "tar",
    FileType.TAR_GZ: "tar.gz",
    FileType.ZIP: "zip",
    FileType.UNKNOWN: "ckan-package",
}


def _is_tar_header(header: bytes) -> bool:
    end = TAR_MAGIC_OFFSET + len(TAR_MAGIC)
    return len(header) >= end and header[TAR_MAGIC_OFFSET:end] == TAR_MAGIC


def _is_tar_gz(path: str) -> bool:
    try:
        with gzip.open(path, "rb") as f:
            return _is_tar_header(f.read(TAR_HEADER_SIZE))
    except (OSError, EOFError, zlib.error):
        return False


def _is_ascii(path: str) -> bool:
    with open(path, "rb") as f:
        while True:
            chunk = f.read(8192)
            if not chunk:
                return True
            if not chunk.isascii():
                return False


def identify_file(path: str) -> FileType:
    """
    识别文件类型

    Args:
        path: 文件路径

    Returns:
        FileType
    """
    with open(path, "rb") as f:
        header = f.read(TAR_HEADER_SIZE)

    if header.startswith(GZIP_MAGIC):
        return FileType.TAR_GZ if _is_tar_gz(path) else FileType.GZIP
    if _is_tar_header(header):
        return FileType.TAR
    if header.startswith(ZIP_MAGIC):
        return FileType.ZIP
    if _is_ascii(path):
        return FileType.ASCII
    return FileType.UNKNOWN


def extension_for(file_type: FileType) -> str:
    """获取文件类型对应的扩展名"""
    return EXTENSIONS[file_type]
