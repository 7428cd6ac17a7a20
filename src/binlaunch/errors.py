"""Error taxonomy for binary installation and launching."""
from typing import Any, Dict, Optional

from binlaunch.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an error with context."""
    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, BinaryManagerError):
        error_info["details"] = error.details

    logger.error("error_occurred", **error_info)


class BinaryManagerError(Exception):
    """Base error class for binary management."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
            "details": self.details,
        }


class ConfigurationError(BinaryManagerError):
    """Missing or invalid binary name or download URL."""


class UnsupportedPlatformError(BinaryManagerError):
    """Host operating system has no release platform prefix."""
    def __init__(self, system: str, machine: str):
        super().__init__(
            f"Unsupported platform: {system} {machine}",
            details={"system": system, "machine": machine},
        )


class TransportError(BinaryManagerError):
    """Download request failed."""
    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        super().__init__(
            f"Error fetching release: {reason}",
            details={"url": url, "status": status, "reason": reason},
        )


class ExtractionError(BinaryManagerError):
    """Archive could not be unpacked into the install directory."""
    def __init__(self, destination: str, reason: str):
        super().__init__(
            f"Error extracting release: {reason}",
            details={"destination": destination, "reason": reason},
        )


class RunTargetMissingError(BinaryManagerError):
    """Binary was run before it was installed."""
    def __init__(self, name: str, binary_path: str):
        super().__init__(
            f"Binary not found at {binary_path}. Install {name} first.",
            details={"name": name, "binary_path": binary_path},
        )


class LaunchError(BinaryManagerError):
    """Installed binary could not be started."""
    def __init__(self, name: str, binary_path: str, reason: str):
        super().__init__(
            f"Could not start {name} at {binary_path}: {reason}",
            details={"name": name, "binary_path": binary_path, "reason": reason},
        )
