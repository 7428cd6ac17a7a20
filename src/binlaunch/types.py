"""Core type definitions"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

InstallOutcome = Enum('InstallOutcome', ['INSTALLED', 'REINSTALLED', 'SKIPPED'])


@dataclass(frozen=True)
class InstallOptions:
    """Install policy"""
    allow_reinstall: bool = True
    suppress_logs: bool = False


@dataclass(frozen=True)
class InstallResult:
    """Install outcome"""
    outcome: InstallOutcome
    binary_path: Path
    url: str | None = None

    @property
    def downloaded(self) -> bool:
        return self.outcome != InstallOutcome.SKIPPED
