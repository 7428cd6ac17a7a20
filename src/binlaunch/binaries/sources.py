"""Download URL construction and validation."""
from typing import Optional
from urllib.parse import urlsplit

from binlaunch.constants import (
    ARCHIVE_EXTENSION,
    DOWNLOAD_PATH,
    GITHUB_BASE_URL,
    HOSTED_SCHEMES,
    RELEASES_PATH,
)
from binlaunch.errors import ConfigurationError


def release_archive_name(name: str, platform_tag: str) -> str:
    """Archive filename published for a platform."""
    return f"{name}-{platform_tag}.{ARCHIVE_EXTENSION}"


def github_release_url(
    owner: str,
    repo: str,
    release_tag: str,
    name: str,
    platform_tag: str,
    proxy_url: Optional[str] = None,
) -> str:
    """Build the download URL of a GitHub release asset.

    A proxy is prepended verbatim (``<proxy>/<url>``); the proxy is expected
    to accept the upstream URL as a path suffix.
    """
    url = (
        f"{GITHUB_BASE_URL}/{owner}/{repo}/{RELEASES_PATH}/{DOWNLOAD_PATH}/"
        f"{release_tag}/{release_archive_name(name, platform_tag)}"
    )
    if proxy_url:
        url = f"{proxy_url}/{url}"
    return url


def validate_url(url: str) -> str:
    """Ensure a download URL is absolute and well formed."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ConfigurationError(f"Invalid download url {url!r}: {e}", details={"url": url}) from e

    if not parts.scheme or " " in url:
        raise ConfigurationError(f"Invalid download url: {url!r}", details={"url": url})
    if not parts.netloc and (parts.scheme in HOSTED_SCHEMES or not parts.path):
        raise ConfigurationError(f"Invalid download url: {url!r}", details={"url": url})

    return url
