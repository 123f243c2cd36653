"""
CLI 模块

命令行接口实现。
"""

import asyncio
from typing import Optional

import click
from loguru import logger

from netkan import __version__
from netkan.config import NetkanConfig, load_config, load_file
from netkan.exceptions import NetkanError
from netkan.logger import setup_logger
from netkan.models import Metadata
from netkan.services import CachingHttpService


def build_config(
    config_path: Optional[str],
    cache_dir: Optional[str],
    overwrite_cache: bool,
) -> NetkanConfig:
    """合并配置文件与命令行参数"""
    config = load_config(config_path)
    if cache_dir:
        config.cache_dir = cache_dir
    if overwrite_cache:
        config.overwrite_cache = True
    return config


async def run_download(config: NetkanConfig, metadata_path: str) -> str:
    """下载单个模组并输出请求过的地址"""
    metadata = Metadata(load_file(metadata_path))
    async with CachingHttpService.from_config(config) as service:
        path = await service.download_module(metadata)
        for url in service.requested_urls:
            logger.info(f"[请求] {url}")
    return path


async def run_text(
    config: NetkanConfig, url: str, mime_type: Optional[str]
) -> str:
    async with CachingHttpService.from_config(config) as service:
        return await service.download_text(url, config.github_token, mime_type)


@click.group()
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(debug: bool):
    """NetKAN - 模组下载缓存工具"""
    setup_logger(level="DEBUG" if debug else None)


@main.command()
@click.argument("metadata_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件路径")
@click.option("--cache-dir", help="下载缓存目录")
@click.option("--overwrite-cache", is_flag=True, help="本次运行中丢弃已有缓存")
def download(
    metadata_file: str,
    config_path: Optional[str],
    cache_dir: Optional[str],
    overwrite_cache: bool,
):
    """下载模组文件并输出缓存路径"""
    try:
        config = build_config(config_path, cache_dir, overwrite_cache)
        path = asyncio.run(run_download(config, metadata_file))
    except NetkanError as e:
        logger.error(f"下载失败: {e}")
        raise click.ClickException(str(e))
    click.echo(path)


@main.command()
@click.argument("url")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件路径")
@click.option("--github-token", envvar="GITHUB_TOKEN", help="访问令牌")
@click.option("--mime-type", help="Accept 类型")
def text(
    url: str,
    config_path: Optional[str],
    github_token: Optional[str],
    mime_type: Optional[str],
):
    """下载文本内容并输出"""
    try:
        config = load_config(config_path)
        if github_token:
            config.github_token = github_token
        content = asyncio.run(run_text(config, url, mime_type))
    except NetkanError as e:
        logger.error(f"请求失败: {e}")
        raise click.ClickException(str(e))
    click.echo(content)


if __name__ == "__main__":
    main()
