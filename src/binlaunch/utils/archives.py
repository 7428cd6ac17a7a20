"""Streaming archive extraction."""
import asyncio
import io
import tarfile
import zlib
from pathlib import Path
from typing import BinaryIO, Optional

import aiohttp

from binlaunch.constants import CHUNK_SIZE, DEFAULT_STRIP_COMPONENTS
from binlaunch.errors import ExtractionError, TransportError
from binlaunch.logging import get_logger

logger = get_logger(__name__)


def _strip_path(path: str, components: int) -> str:
    parts = [p for p in path.split("/") if p not in ("", ".")]
    return "/".join(parts[components:])


def strip_member(member: tarfile.TarInfo, components: int = DEFAULT_STRIP_COMPONENTS) -> Optional[tarfile.TarInfo]:
    """Drop leading path components from an archive member.

    Returns ``None`` for members with nothing left after stripping, such as
    the top-level wrapper folder itself.
    """
    name = _strip_path(member.name, components)
    if not name:
        return None

    member.name = name
    if member.islnk():
        member.linkname = _strip_path(member.linkname, components)
    return member


def extract_stream(
    fileobj: BinaryIO,
    dest_dir: Path,
    strip_components: int = DEFAULT_STRIP_COMPONENTS,
) -> int:
    """Extract a gzipped tar read sequentially from ``fileobj``.

    The archive is never seeked or buffered whole; members are written as
    they arrive. Returns the number of members extracted.
    """
    extracted = 0
    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as archive:
            for member in archive:
                stripped = strip_member(member, strip_components)
                if stripped is None:
                    continue
                archive.extract(stripped, dest_dir, filter="data")
                extracted += 1
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        logger.error("archive_extraction_failed", destination=str(dest_dir), error=str(e))
        raise ExtractionError(str(dest_dir), str(e) or e.__class__.__name__) from e

    logger.debug("archive_extracted", destination=str(dest_dir), members=extracted)
    return extracted


class AsyncStreamReader(io.RawIOBase):
    """Blocking file object over an aiohttp body, for use off the event loop.

    Each ``read`` schedules one ``content.read`` on ``loop`` and waits for
    it, so at most one chunk is held in memory at a time.
    """

    def __init__(self, response: aiohttp.ClientResponse, loop: asyncio.AbstractEventLoop):
        super().__init__()
        self._response = response
        self._loop = loop
        self.bytes_read = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = CHUNK_SIZE
        future = asyncio.run_coroutine_threadsafe(
            self._response.content.read(min(size, CHUNK_SIZE)), self._loop
        )
        try:
            chunk = future.result()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(str(self._response.url), str(e) or e.__class__.__name__) from e
        self.bytes_read += len(chunk)
        return chunk

    def readinto(self, buffer) -> int:
        chunk = self.read(len(buffer))
        buffer[:len(chunk)] = chunk
        return len(chunk)


async def extract_response(
    response: aiohttp.ClientResponse,
    dest_dir: Path,
    strip_components: int = DEFAULT_STRIP_COMPONENTS,
) -> int:
    """Extract a streamed tar.gz response body into ``dest_dir``.

    Completes only once the body has been consumed and every member written.
    """
    reader = AsyncStreamReader(response, asyncio.get_running_loop())
    extracted = await asyncio.to_thread(extract_stream, reader, dest_dir, strip_components)

    # tar end-of-archive blocks and trailing padding
    while chunk := await response.content.read(CHUNK_SIZE):
        reader.bytes_read += len(chunk)

    logger.debug("response_extracted", url=str(response.url), size=reader.bytes_read)
    return extracted
