"""Install release binaries and launch them transparently."""

from binlaunch.types import InstallOptions, InstallOutcome, InstallResult
from binlaunch.manager import BinaryManager
from binlaunch.binaries import resolve_platform, github_release_url
from binlaunch.launcher import install_or_exit, run_or_exit
from binlaunch.errors import (
    BinaryManagerError,
    ConfigurationError,
    UnsupportedPlatformError,
    TransportError,
    ExtractionError,
    RunTargetMissingError,
    LaunchError,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "InstallOptions",
    "InstallOutcome",
    "InstallResult",

    # Lifecycle
    "BinaryManager",
    "resolve_platform",
    "github_release_url",

    # Process boundary
    "install_or_exit",
    "run_or_exit",

    # Error types
    "BinaryManagerError",
    "ConfigurationError",
    "UnsupportedPlatformError",
    "TransportError",
    "ExtractionError",
    "RunTargetMissingError",
    "LaunchError",
]
