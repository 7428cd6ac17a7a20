"""Platform detection and mapping."""
import platform
from typing import Optional

from binlaunch.constants import OS_PREFIXES
from binlaunch.errors import UnsupportedPlatformError


def resolve_platform(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Get the release platform tag for a host, e.g. ``linux-x86_64``.

    The architecture is passed through as reported by the host, so release
    archives must be published under the host's native architecture name.
    """
    if system is None:
        system = platform.system()
    if machine is None:
        machine = platform.machine()

    prefix = OS_PREFIXES.get(system)
    if prefix is None:
        raise UnsupportedPlatformError(system, machine)

    return f"{prefix}-{machine}"


def is_platform_supported() -> bool:
    """Check if current platform is supported."""
    try:
        resolve_platform()
        return True
    except UnsupportedPlatformError:
        return False
