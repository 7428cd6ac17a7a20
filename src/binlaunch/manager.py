"""Install and launch a release binary."""
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from binlaunch.binaries.platforms import resolve_platform
from binlaunch.binaries.sources import github_release_url, validate_url
from binlaunch.constants import BIN_DIRNAME, DEFAULT_STRIP_COMPONENTS
from binlaunch.errors import (
    ConfigurationError,
    ExtractionError,
    LaunchError,
    RunTargetMissingError,
)
from binlaunch.logging import get_logger
from binlaunch.types import InstallOptions, InstallOutcome, InstallResult
from binlaunch.utils.archives import extract_response
from binlaunch.utils.fetching import open_stream
from binlaunch.utils.process import spawn_inherited

logger = get_logger(__name__)

DEFAULT_BASE_DIR = Path(__file__).resolve().parent


class BinaryManager:
    """Owns ``<base_dir>/bin`` for a single named binary.

    The whole install directory belongs to the manager: reinstalling wipes it.
    Concurrent installs into the same directory are not supported.
    """

    def __init__(self, name: str, base_dir: Optional[Path] = None):
        errors = []
        if name and not isinstance(name, str):
            errors.append("name must be a string")
        if not name:
            errors.append("You must specify the name of your binary")
        if errors:
            raise ConfigurationError("\n".join(errors), details={"errors": errors})

        self.name = name
        self.install_directory = Path(base_dir or DEFAULT_BASE_DIR) / BIN_DIRNAME
        self.install_directory.mkdir(parents=True, exist_ok=True)
        self.binary_path = self.install_directory / name
        self.source_url: Optional[str] = None

    def __repr__(self) -> str:
        return f"BinaryManager(name={self.name!r}, install_directory={str(self.install_directory)!r})"

    def exists(self) -> bool:
        return self.binary_path.exists()

    def uninstall(self) -> None:
        """Remove the install directory and everything in it."""
        shutil.rmtree(self.install_directory, ignore_errors=True)
        logger.debug("binary_uninstalled", name=self.name, directory=str(self.install_directory))

    def configure_url(self, url: str) -> None:
        """Download from an explicit URL, checked when installing."""
        self.source_url = url

    def configure_github_release(
        self,
        owner: str,
        repo: str,
        release_tag: str,
        proxy_url: Optional[str] = None,
    ) -> None:
        """Download the current platform's asset of a GitHub release."""
        self.source_url = github_release_url(
            owner, repo, release_tag, self.name, resolve_platform(), proxy_url
        )

    async def install(
        self,
        fetch_options: Optional[Dict[str, Any]] = None,
        options: Optional[InstallOptions] = None,
    ) -> InstallResult:
        """Download and unpack the configured archive into the install directory.

        An existing binary is replaced when ``allow_reinstall`` is set and
        left untouched otherwise. Failures leave partial contents in place;
        the next install starts from an empty directory.
        """
        options = options or InstallOptions()

        if not self.source_url:
            raise ConfigurationError(
                f"You must configure the download url of {self.name} binary",
                details={"name": self.name},
            )
        url = validate_url(self.source_url)

        outcome = InstallOutcome.INSTALLED
        if self.exists():
            if not options.allow_reinstall:
                logger.info("binary_skipping", name=self.name, reason="already installed")
                return InstallResult(InstallOutcome.SKIPPED, self.binary_path, url)
            logger.info("binary_reinstalling", name=self.name, reason="already installed")
            self.uninstall()
            outcome = InstallOutcome.REINSTALLED

        self.install_directory.mkdir(parents=True, exist_ok=True)
        if not options.suppress_logs:
            logger.info("binary_downloading", name=self.name, url=url)

        async with open_stream(url, fetch_options) as response:
            await extract_response(response, self.install_directory, DEFAULT_STRIP_COMPONENTS)

        if not self.exists():
            raise ExtractionError(
                str(self.install_directory), f"archive did not contain {self.name}"
            )

        if not options.suppress_logs:
            logger.info("binary_installed", name=self.name, path=str(self.binary_path))

        return InstallResult(outcome, self.binary_path, url)

    async def run(
        self, argv: Optional[Sequence[str]] = None, install_missing: bool = False
    ) -> int:
        """Run the installed binary with ``argv`` and return its exit code.

        ``argv`` defaults to this process's arguments without the script name.
        A missing binary is an error unless ``install_missing`` is set, in
        which case it is installed with default options first.
        """
        if not self.exists():
            if not install_missing:
                raise RunTargetMissingError(self.name, str(self.binary_path))
            logger.info("binary_missing", name=self.name, path=str(self.binary_path))
            await self.install()

        args = list(sys.argv[1:] if argv is None else argv)
        try:
            code = await spawn_inherited(self.binary_path, args)
        except FileNotFoundError as e:
            raise RunTargetMissingError(self.name, str(self.binary_path)) from e
        except OSError as e:
            raise LaunchError(self.name, str(self.binary_path), e.strerror or str(e)) from e

        logger.info("process_exited", name=self.name, code=code)
        return code
