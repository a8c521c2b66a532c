# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment checks for rseval.

Fail early and clearly: a missing cargo is far easier to understand as
"cargo not found on PATH" than as a subprocess error halfway through a run.
"""

import platform
import shutil
import sys
from pathlib import Path
from typing import NamedTuple, Optional

MINIMUM_PYTHON_MAJOR = 3
MINIMUM_PYTHON_MINOR = 11


class SystemInfo(NamedTuple):
    """Snapshot of the current system environment."""

    python_version: str
    platform: str
    architecture: str


def get_python_version() -> tuple[int, int, int]:
    """Return the current Python version as a (major, minor, micro) tuple."""
    return sys.version_info[:3]


def check_minimum_python() -> None:
    """
    Verify we're running a supported Python.

    Raises:
        RuntimeError: If the interpreter is older than the minimum.
    """
    major, minor, _ = get_python_version()
    if major < MINIMUM_PYTHON_MAJOR or (
        major == MINIMUM_PYTHON_MAJOR and minor < MINIMUM_PYTHON_MINOR
    ):
        raise RuntimeError(
            f"rseval requires Python >= {MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}, "
            f"but you're running {major}.{minor}. Please upgrade."
        )


def find_cargo(cargo: str) -> Optional[Path]:
    """Resolve the configured cargo to an executable path, or None if it isn't there."""
    resolved = shutil.which(cargo)
    return Path(resolved) if resolved is not None else None


def get_system_info() -> SystemInfo:
    """Collect basic system information for logging and diagnostics."""
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
    )
