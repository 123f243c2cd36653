import asyncio
import os

import aiohttp
import pytest

from netkan.download.net import Net
from netkan.exceptions import DownloadNetworkError


class FakeContent:
    def __init__(self, body):
        self.body = body

    async def iter_chunked(self, size):
        for start in range(0, len(self.body), size):
            yield self.body[start:start + size]


class FakeResponse:
    def __init__(self, status=200, body=b""):
        self.status = status
        self.content = FakeContent(body)

    async def text(self):
        return self.body_text()

    def body_text(self):
        return self.content.body.decode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


def test_download_writes_temp_file(tmp_path):
    body = b"x" * 20000
    net = Net(session=FakeSession(FakeResponse(body=body)), temp_dir=str(tmp_path))

    path = asyncio.run(net.download("https://example.com/foo.zip"))

    assert os.path.dirname(path) == str(tmp_path)
    with open(path, "rb") as f:
        assert f.read() == body


def test_download_http_error_removes_temp_file(tmp_path):
    net = Net(session=FakeSession(FakeResponse(status=404)), temp_dir=str(tmp_path))

    with pytest.raises(DownloadNetworkError) as exc_info:
        asyncio.run(net.download("https://example.com/missing.zip"))

    assert exc_info.value.context["status"] == 404
    assert os.listdir(tmp_path) == []


def test_download_transport_error(tmp_path):
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
    net = Net(session=session, temp_dir=str(tmp_path))

    with pytest.raises(DownloadNetworkError):
        asyncio.run(net.download("https://example.com/foo.zip"))

    assert os.listdir(tmp_path) == []


def test_download_text_headers():
    session = FakeSession(FakeResponse(body=b'{"tag_name": "v1.0"}'))
    net = Net(session=session)

    text = asyncio.run(
        net.download_text(
            "https://api.github.com/repos/foo/bar/releases/latest",
            auth_token="secret",
            mime_type="application/vnd.github.v3+json",
        )
    )

    assert text == '{"tag_name": "v1.0"}'
    headers = session.requests[0][1]["headers"]
    assert headers["Authorization"] == "token secret"
    assert headers["Accept"] == "application/vnd.github.v3+json"


def test_download_text_without_token():
    session = FakeSession(FakeResponse(body=b"ok"))
    asyncio.run(Net(session=session).download_text("https://example.com"))
    assert session.requests[0][1]["headers"] == {}


def test_download_text_errors():
    net = Net(session=FakeSession(FakeResponse(status=500)))
    with pytest.raises(DownloadNetworkError):
        asyncio.run(net.download_text("https://example.com"))

    net = Net(session=FakeSession(error=asyncio.TimeoutError()))
    with pytest.raises(DownloadNetworkError):
        asyncio.run(net.download_text("https://example.com"))


def test_borrowed_session_is_not_closed():
    session = FakeSession()

    async def use():
        async with Net(session=session):
            pass

    asyncio.run(use())
    assert session.closed is False
