"""
文件校验器

实现缓存键计算、ZIP 完整性检查。
"""

import hashlib
import os
import zipfile
import zlib
from typing import Tuple


class FileVerifier:
    """文件校验器"""

    @staticmethod
    def url_hash(url: str) -> str:
        """URL 的缓存键（SHA1 前 8 位，大写）"""
        return hashlib.sha1(url.encode("utf-8")).hexdigest()[:8].upper()

    @staticmethod
    def zip_valid(file_path: str) -> Tuple[bool, str]:
        """
        检查 ZIP 文件是否完整

        Returns:
            (是否有效, 无效原因)
        """
        try:
            with zipfile.ZipFile(file_path) as archive:
                for info in archive.infolist():
                    if info.flag_bits & 0x1:
                        return False, f"{info.filename} is encrypted"
                bad_member = archive.testzip()
        except zipfile.BadZipFile as e:
            return False, f"{os.path.basename(file_path)} is not a ZIP archive: {e}"
        except (OSError, EOFError, zlib.error, NotImplementedError, RuntimeError) as e:
            return False, str(e)

        if bad_member is not None:
            return False, f"{bad_member} has an invalid CRC"
        return True, ""
