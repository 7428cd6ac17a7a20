"""Streaming release downloads."""
import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from binlaunch.errors import ConfigurationError, TransportError
from binlaunch.logging import get_logger

logger = get_logger(__name__)


def build_request_options(fetch_options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Translate caller fetch options into ``ClientSession.request`` keywords."""
    options = dict(fetch_options or {})
    options.pop("url", None)
    options.pop("method", None)

    timeout = options.get("timeout")
    if timeout is not None and not isinstance(timeout, aiohttp.ClientTimeout):
        try:
            options["timeout"] = aiohttp.ClientTimeout(total=float(timeout))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid fetch option timeout: {timeout!r}",
                details={"option": "timeout", "value": repr(timeout)},
            ) from e

    return options


@asynccontextmanager
async def open_stream(
    url: str, fetch_options: Optional[Dict[str, Any]] = None
) -> AsyncIterator[aiohttp.ClientResponse]:
    """Open a download and yield the response with its body unread.

    The ``url`` argument always wins over a ``url`` key in ``fetch_options``.
    """
    method = (fetch_options or {}).get("method", "GET")
    options = build_request_options(fetch_options)

    logger.debug("download_request", url=url, method=method, options=sorted(options))

    try:
        async with aiohttp.ClientSession() as session:
            try:
                request = session.request(method, url, **options)
            except TypeError as e:
                raise ConfigurationError(
                    f"Invalid fetch options {sorted(options)}: {e}",
                    details={"options": sorted(options), "reason": str(e)},
                ) from e
            async with request as response:
                if response.status >= 400:
                    logger.error(
                        "download_request_failed",
                        url=url,
                        status=response.status,
                        reason=response.reason,
                    )
                    raise TransportError(
                        url,
                        f"Request failed with status code {response.status}",
                        status=response.status,
                    )
                yield response
    except aiohttp.ClientError as e:
        raise TransportError(url, str(e) or e.__class__.__name__,
                             status=getattr(e, "status", None)) from e
    except asyncio.TimeoutError as e:
        raise TransportError(url, "Request timed out") from e
