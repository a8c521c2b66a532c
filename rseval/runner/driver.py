# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build and run driver.

Two processes, one after the other, both blocking:

  1. `cargo build` inside the generated project
  2. the executable cargo produced, started directly

The binary is started by path rather than through `cargo run` so that it
runs in the caller's working directory: a snippet that opens "data.txt"
should find the user's file, not look inside the temporary project.

Both processes inherit stdin, stdout and stderr. Nothing is captured; the
user sees cargo's diagnostics and the snippet's output as they happen.

Only `cargo build` and the binary it produced are ever executed, always as
an argument list. No shell=True.
"""

import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional

from rseval.config.schema import ToolchainConfig
from rseval.errors import DriverError
from rseval.logging.logger import get_logger
from rseval.project.materializer import GeneratedProject
from rseval.runner.models import BuildResult, EvalOptions, EvalOutcome, RunResult

logger = get_logger(__name__)

STAGED_DIRNAME = "bin"


def _build_env(toolchain: ToolchainConfig) -> dict[str, str]:
    """Environment for cargo: the parent's, plus offline mode when asked for."""
    env = dict(os.environ)
    if toolchain.offline:
        env["CARGO_NET_OFFLINE"] = "true"
    return env


def _split_returncode(returncode: int) -> tuple[Optional[int], Optional[int]]:
    """subprocess reports death by signal N as -N. Returns (exit_code, signal)."""
    if returncode < 0:
        return None, -returncode
    return returncode, None


def _run_process(
    command: list[str],
    what: str,
    cwd: Optional[Path] = None,
    env: Optional[dict[str, str]] = None,
    timeout_seconds: Optional[int] = None,
) -> tuple[int, float]:
    """
    Run a process to completion with inherited stdio.

    Returns:
        (returncode, elapsed_seconds)

    Raises:
        DriverError: If the process cannot be started or overruns its timeout.
    """
    start = time.monotonic()
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as err:
        raise DriverError(f"{what} timed out after {timeout_seconds}s") from err
    except FileNotFoundError as err:
        raise DriverError(f"Cannot execute {what}: {command[0]} not found") from err
    except OSError as err:
        raise DriverError(f"Cannot execute {what}: {err}") from err

    return completed.returncode, time.monotonic() - start


def build_command(
    project: GeneratedProject,
    options: EvalOptions,
    toolchain: ToolchainConfig,
) -> list[str]:
    """
    The `cargo build` invocation for a project.

    --target-dir is pinned to the project's own target/ so a CARGO_TARGET_DIR
    in the user's environment can't send the artifacts somewhere the cache
    doesn't look.
    """
    command = [
        toolchain.cargo,
        "build",
        "--manifest-path",
        str(project.manifest_path),
        "--target-dir",
        str(project.target_dir),
    ]
    if options.quiet:
        command.append("--quiet")
    if options.release:
        command.append("--release")
    return command


def build_project(
    project: GeneratedProject,
    options: EvalOptions,
    toolchain: ToolchainConfig,
) -> BuildResult:
    """Run `cargo build` with the project as working directory."""
    command = build_command(project, options, toolchain)
    logger.debug("Starting build", extra={"command": command, "project": str(project.root)})

    returncode, elapsed = _run_process(
        command,
        "cargo build",
        cwd=project.root,
        env=_build_env(toolchain),
        timeout_seconds=toolchain.build_timeout_seconds,
    )
    exit_code, signal = _split_returncode(returncode)

    logger.info(
        "Build finished",
        extra={
            "exit_code": exit_code,
            "signal": signal,
            "elapsed_seconds": round(elapsed, 3),
            "release": options.release,
        },
    )
    return BuildResult(exit_code=exit_code, elapsed_seconds=elapsed, signal=signal)


def binary_path(project: GeneratedProject, package_name: str, release: bool = False) -> Path:
    """Where cargo puts the executable for the given profile."""
    profile = "release" if release else "debug"
    return project.target_dir / profile / package_name


def stage_binary(project: GeneratedProject, package_name: str, release: bool = False) -> Path:
    """
    Copy the built executable out of target/ into `<project>/bin/`.

    Once staged, target/ can go back to the cache (and the cache lock be
    released) before the program starts. The original stays in target/.

    Raises:
        DriverError: If the executable is missing or cannot be copied.
    """
    source = binary_path(project, package_name, release)
    staged = project.root / STAGED_DIRNAME / package_name
    try:
        staged.parent.mkdir(exist_ok=True)
        shutil.copy2(source, staged)
    except OSError as err:
        raise DriverError(f"Cannot stage executable {source}: {err}") from err

    logger.debug("Executable staged", extra={"binary": str(staged)})
    return staged


def run_binary(path: Path, toolchain: ToolchainConfig) -> RunResult:
    """Run the built executable in the caller's working directory."""
    logger.debug("Starting binary", extra={"binary": str(path)})

    returncode, elapsed = _run_process(
        [str(path)],
        "snippet binary",
        timeout_seconds=toolchain.run_timeout_seconds,
    )
    exit_code, signal = _split_returncode(returncode)

    logger.info(
        "Run finished",
        extra={"exit_code": exit_code, "signal": signal, "elapsed_seconds": round(elapsed, 3)},
    )
    return RunResult(exit_code=exit_code, elapsed_seconds=elapsed, signal=signal)


def evaluate(
    project: GeneratedProject,
    options: EvalOptions,
    toolchain: ToolchainConfig,
    package_name: str,
) -> EvalOutcome:
    """
    Build the project and, if that worked, run the result.

    A failed build is reported as-is and the binary is never started.
    """
    build = build_project(project, options, toolchain)
    if not build.success:
        return EvalOutcome(build=build)

    run = run_binary(binary_path(project, package_name, options.release), toolchain)
    return EvalOutcome(build=build, run=run)
