"""Process boundary for wrapper scripts.

``BinaryManager`` raises typed errors; the functions here turn them into a
message on stderr and a non-zero exit status, and pass a child's exit code
through as this process's own.
"""
import asyncio
import sys
from typing import Any, Dict, NoReturn, Optional, Sequence

from binlaunch.errors import BinaryManagerError, log_error
from binlaunch.logging import configure_logging
from binlaunch.manager import BinaryManager
from binlaunch.types import InstallOptions, InstallResult


def exit_code_for(returncode: int) -> int:
    """Map a child return code to a shell-style exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def fail(error: BinaryManagerError) -> NoReturn:
    log_error(error)
    print(str(error), file=sys.stderr)
    sys.exit(1)


def install_or_exit(
    manager: BinaryManager,
    fetch_options: Optional[Dict[str, Any]] = None,
    options: Optional[InstallOptions] = None,
) -> InstallResult:
    """Install ``manager``'s binary, exiting with status 1 on any failure."""
    configure_logging()
    try:
        return asyncio.run(manager.install(fetch_options, options))
    except BinaryManagerError as e:
        fail(e)
    except KeyboardInterrupt:
        sys.exit(130)


def run_or_exit(
    manager: BinaryManager,
    argv: Optional[Sequence[str]] = None,
    install_missing: bool = False,
) -> NoReturn:
    """Run ``manager``'s binary and exit with the child's exit code."""
    configure_logging()
    try:
        code = asyncio.run(manager.run(argv, install_missing=install_missing))
    except BinaryManagerError as e:
        fail(e)
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(exit_code_for(code))
