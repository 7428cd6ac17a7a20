import io
import tarfile
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from binlaunch.manager import BinaryManager


def build_archive(files: dict[str, bytes], wrapper: str = "wrapper", mode: int = 0o755) -> bytes:
    """Gzipped tarball with ``files`` inside a single top-level folder."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        folder = tarfile.TarInfo(wrapper)
        folder.type = tarfile.DIRTYPE
        folder.mode = 0o755
        tar.addfile(folder)
        for name, data in files.items():
            info = tarfile.TarInfo(f"{wrapper}/{name}")
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


class FakeContent:
    """Stands in for ``aiohttp.StreamReader``."""
    def __init__(self, data: bytes, error: Exception | None = None):
        self._buf = io.BytesIO(data)
        self._error = error

    async def read(self, n: int = -1) -> bytes:
        if self._error:
            raise self._error
        return self._buf.read(n)


class FakeResponse:
    def __init__(self, data: bytes, url: str = "https://example.com/tool.tar.gz",
                 error: Exception | None = None):
        self.content = FakeContent(data, error)
        self.url = url
        self.status = 200
        self.reason = "OK"


class FakeTransport:
    """Records downloads and serves queued archive payloads."""
    def __init__(self):
        self.calls = []
        self.payloads = []
        self.error = None

    def queue(self, data: bytes) -> None:
        self.payloads.append(data)

    @asynccontextmanager
    async def open_stream(self, url, fetch_options=None):
        self.calls.append((url, fetch_options))
        if self.error:
            raise self.error
        yield FakeResponse(self.payloads.pop(0), url)


@pytest.fixture
def make_archive():
    return build_archive


@pytest.fixture
def transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr("binlaunch.manager.open_stream", fake.open_stream)
    return fake


@pytest.fixture
def manager(tmp_path):
    """Manager for a binary named ``tool`` rooted in a temp dir."""
    return BinaryManager("tool", base_dir=tmp_path)


@pytest.fixture
def make_response():
    return FakeResponse


@pytest_asyncio.fixture
async def release_server():
    """Local HTTP server streaming registered archives in small chunks.

    Yields ``serve(path, payload) -> url``; unknown paths answer 404.
    """
    payloads = {}

    async def handler(request):
        payload = payloads.get(request.path)
        if payload is None:
            raise web.HTTPNotFound()
        response = web.StreamResponse()
        await response.prepare(request)
        for start in range(0, len(payload), 1024):
            await response.write(payload[start:start + 1024])
        await response.write_eof()
        return response

    app = web.Application()
    app.router.add_get("/{tail:.*}", handler)

    async with TestServer(app) as server:
        def serve(path: str, payload: bytes) -> str:
            payloads[path] = payload
            return str(server.make_url(path))
        yield serve
