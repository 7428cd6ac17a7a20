"""Tests for streaming downloads."""
import os
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from binlaunch.errors import ConfigurationError, TransportError
from binlaunch.utils.archives import extract_response
from binlaunch.utils.fetching import build_request_options, open_stream

URL = "https://example.com/tool-linux-x64.tar.gz"


def mock_session_for(response=None, error=None):
    """ClientSession mock whose request() yields ``response`` or raises ``error``."""
    request_ctx = MagicMock()
    request_ctx.__aenter__ = AsyncMock(return_value=response)
    request_ctx.__aexit__ = AsyncMock(return_value=False)

    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    if error:
        mock_session.request = MagicMock(side_effect=error)
    else:
        mock_session.request = MagicMock(return_value=request_ctx)
    return mock_session


def test_build_request_options_drops_url():
    options = build_request_options({"url": "https://elsewhere.example", "headers": {"A": "b"}})
    assert options == {"headers": {"A": "b"}}


def test_build_request_options_numeric_timeout():
    options = build_request_options({"timeout": 5})
    assert options["timeout"] == aiohttp.ClientTimeout(total=5.0)


def test_build_request_options_passthrough():
    timeout = aiohttp.ClientTimeout(connect=2)
    options = build_request_options({"timeout": timeout, "proxy": "http://squid:3128"})
    assert options == {"timeout": timeout, "proxy": "http://squid:3128"}


def test_build_request_options_empty():
    assert build_request_options(None) == {}


@pytest.mark.asyncio
async def test_open_stream():
    """Test the response is yielded with the resolved url winning"""
    mock_response = MagicMock()
    mock_response.status = 200
    mock_session = mock_session_for(mock_response)

    with patch("aiohttp.ClientSession", return_value=mock_session):
        async with open_stream(URL, {"url": "https://ignored.example", "headers": {"X": "1"}}) as response:
            assert response is mock_response

    mock_session.request.assert_called_once_with("GET", URL, headers={"X": "1"})


@pytest.mark.asyncio
async def test_open_stream_custom_method():
    mock_response = MagicMock()
    mock_response.status = 200
    mock_session = mock_session_for(mock_response)

    with patch("aiohttp.ClientSession", return_value=mock_session):
        async with open_stream(URL, {"method": "POST"}):
            pass

    mock_session.request.assert_called_once_with("POST", URL)


@pytest.mark.asyncio
async def test_open_stream_http_error():
    mock_response = MagicMock()
    mock_response.status = 404
    mock_response.reason = "Not Found"
    mock_session = mock_session_for(mock_response)

    with patch("aiohttp.ClientSession", return_value=mock_session):
        with pytest.raises(TransportError, match="status code 404") as exc_info:
            async with open_stream(URL):
                pytest.fail("body must not be reached")

    assert exc_info.value.details["status"] == 404
    assert exc_info.value.details["url"] == URL


@pytest.mark.asyncio
async def test_open_stream_connection_error():
    mock_session = mock_session_for(error=aiohttp.ClientConnectionError("Name or service not known"))

    with patch("aiohttp.ClientSession", return_value=mock_session):
        with pytest.raises(TransportError, match="Name or service not known"):
            async with open_stream(URL):
                pass


@pytest.mark.asyncio
async def test_open_stream_timeout():
    mock_session = mock_session_for(error=TimeoutError())

    with patch("aiohttp.ClientSession", return_value=mock_session):
        with pytest.raises(TransportError, match="timed out"):
            async with open_stream(URL, {"timeout": 1}):
                pass


def test_build_request_options_invalid_timeout():
    with pytest.raises(ConfigurationError, match="Invalid fetch option timeout: 'soon'"):
        build_request_options({"timeout": "soon"})


@pytest.mark.asyncio
async def test_open_stream_unknown_option():
    """Test options the HTTP client rejects become configuration errors"""
    mock_session = mock_session_for(
        error=TypeError("_request() got an unexpected keyword argument 'responseType'")
    )

    with patch("aiohttp.ClientSession", return_value=mock_session):
        with pytest.raises(ConfigurationError, match="responseType") as exc_info:
            async with open_stream(URL, {"responseType": "stream"}):
                pass

    assert exc_info.value.details["options"] == ["responseType"]


@pytest.mark.asyncio
async def test_open_stream_local_server(tmp_path, release_server, make_archive):
    """Test a real streamed body is extracted through the event loop bridge"""
    payload = make_archive({"tool": os.urandom(200 * 1024), "LICENSE": b"MIT"})
    url = release_server("/acme/tool-linux-x64.tar.gz", payload)

    async with open_stream(url) as response:
        count = await extract_response(response, tmp_path)

    assert count == 2
    assert (tmp_path / "tool").stat().st_size == 200 * 1024
    assert (tmp_path / "LICENSE").read_bytes() == b"MIT"


@pytest.mark.asyncio
async def test_open_stream_local_server_not_found(release_server):
    url = release_server("/tool.tar.gz", b"") + ".missing"

    with pytest.raises(TransportError, match="status code 404"):
        async with open_stream(url):
            pass
