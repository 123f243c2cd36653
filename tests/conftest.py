import io
import os
import zipfile

import pytest

from netkan.download.cache import ContentStore
from netkan.exceptions import DownloadNetworkError


def make_zip_bytes(files=None) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in (files or {"GameData/Foo/foo.cfg": "PART {}\n" * 50}).items():
            archive.writestr(name, data)
    return buffer.getvalue()


class FakeStore(ContentStore):
    """内存中的内容存储"""

    def __init__(self, cached=None, zip_result=(True, "")):
        self.cached = dict(cached or {})
        self.zip_result = zip_result
        self.lookups = []
        self.removed = []
        self.stored = []

    async def get_cached_filename(self, url, remote_timestamp=None):
        self.lookups.append((url, remote_timestamp))
        return self.cached.get(url)

    async def remove(self, url):
        self.removed.append(url)
        self.cached.pop(url, None)

    async def store(self, url, path, description, move=False):
        target = os.path.join(os.path.dirname(path), "stored-" + description)
        os.replace(path, target)
        self.stored.append((url, description, move))
        self.cached[url] = target
        return target

    def zip_valid(self, path):
        return self.zip_result


class FakeNet:
    """按 URL 返回预设内容的下载客户端"""

    def __init__(self, tmp_path, files=None, texts=None):
        self.tmp_path = tmp_path
        self.files = dict(files or {})
        self.texts = dict(texts or {})
        self.downloads = []
        self.text_requests = []
        self.closed = False

    async def download(self, url):
        self.downloads.append(url)
        if url not in self.files:
            raise DownloadNetworkError(f"HTTP 404: {url}", context={"url": url})
        path = self.tmp_path / f"download-{len(self.downloads)}"
        path.write_bytes(self.files[url])
        return str(path)

    async def download_text(self, url, auth_token=None, mime_type=None):
        self.text_requests.append((url, auth_token, mime_type))
        if url not in self.texts:
            raise DownloadNetworkError(f"HTTP 404: {url}", context={"url": url})
        return self.texts[url]

    async def close(self):
        self.closed = True


@pytest.fixture
def zip_bytes():
    return make_zip_bytes()


@pytest.fixture
def record():
    return {
        "spec_version": 1,
        "identifier": "Foo",
        "version": "1:2.0",
        "download": "https://example.com/foo.zip",
        "download_hash": {"sha1": "abcdef1234567890"},
        "x_netkan_asset_updated": "2024-03-01T12:00:00Z",
    }
