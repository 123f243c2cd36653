"""
配置模块

NetKAN 运行配置的定义与加载，支持 TOML / JSON / YAML。
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml

from netkan import __version__
from netkan.exceptions import ConfigError, ConfigParseError, ConfigValidationError

DEFAULT_CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "netkan")


def default_cache_dir() -> str:
    return os.environ.get("NETKAN_CACHE_DIR", DEFAULT_CACHE_DIR)


@dataclass
class NetkanConfig:
    """NetKAN 配置"""

    cache_dir: str
    overwrite_cache: bool = False
    github_token: Optional[str] = None
    text_cache_lifetime: float = 120.0
    timeout: float = 60.0
    user_agent: str = f"netkan/{__version__}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetkanConfig":
        """从字典创建配置"""
        if not isinstance(data, dict):
            raise ConfigValidationError("配置必须是字典")

        cache_dir = data.get("cache_dir") or default_cache_dir()
        if not isinstance(cache_dir, str):
            raise ConfigValidationError(
                "cache_dir 必须是字符串", context={"cache_dir": cache_dir}
            )

        overwrite_cache = data.get("overwrite_cache", False)
        if not isinstance(overwrite_cache, bool):
            raise ConfigValidationError(
                "overwrite_cache 必须是布尔值",
                context={"overwrite_cache": overwrite_cache},
            )

        github_token = data.get("github_token")
        if github_token is not None and not isinstance(github_token, str):
            raise ConfigValidationError("github_token 必须是字符串")

        numbers = {}
        for name, default in (("text_cache_lifetime", 120.0), ("timeout", 60.0)):
            value = data.get(name, default)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigValidationError(
                    f"{name} 必须是数字", context={name: value}
                )
            if value <= 0:
                raise ConfigValidationError(
                    f"{name} 必须大于 0", context={name: value}
                )
            numbers[name] = float(value)

        user_agent = data.get("user_agent", f"netkan/{__version__}")
        if not isinstance(user_agent, str):
            raise ConfigValidationError("user_agent 必须是字符串")

        return cls(
            cache_dir=os.path.expanduser(cache_dir),
            overwrite_cache=overwrite_cache,
            github_token=github_token,
            user_agent=user_agent,
            **numbers,
        )


def load_file(file_path: str) -> Any:
    """按扩展名读取 TOML / JSON / YAML 文件"""
    path = Path(file_path)

    if not path.exists():
        raise ConfigError(f"文件不存在: {file_path}", context={"path": file_path})

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return toml.load(file_path)
        elif suffix in (".json", ".netkan", ".ckan"):
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8"))
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"无法解析文件: {file_path}", context={"path": file_path, "error": str(e)}
        ) from e

    raise ConfigError(f"不支持的文件格式: {suffix}", context={"path": file_path})


def load_config(config_path: Optional[str] = None) -> NetkanConfig:
    """加载配置文件，未指定时使用默认配置"""
    if config_path is None:
        return NetkanConfig.from_dict({})
    return NetkanConfig.from_dict(load_file(config_path))
