# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models passed between the CLI and the build/run driver.

All frozen: a result describes a process that has already finished.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EvalOptions:
    """Per-run switches, merged from the config file and the command line."""

    print_result: bool = False
    quiet: bool = False
    release: bool = False


@dataclass(frozen=True)
class BuildResult:
    """What came back from `cargo build`."""

    exit_code: Optional[int]
    elapsed_seconds: float
    signal: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class RunResult:
    """What came back from running the snippet's binary."""

    exit_code: Optional[int]
    elapsed_seconds: float
    signal: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class EvalOutcome:
    """
    The build, and the run if the build succeeded.

    `final` is whichever process decides the tool's exit code: the run when
    there was one, otherwise the failed build.
    """

    build: BuildResult
    run: Optional[RunResult] = None

    @property
    def final(self) -> BuildResult | RunResult:
        return self.run if self.run is not None else self.build
