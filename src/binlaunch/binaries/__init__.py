"""Platform and download source resolution."""
from binlaunch.binaries.platforms import is_platform_supported, resolve_platform
from binlaunch.binaries.sources import (
    github_release_url,
    release_archive_name,
    validate_url,
)

__all__ = [
    "resolve_platform",
    "is_platform_supported",
    "github_release_url",
    "release_archive_name",
    "validate_url",
]
