# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The evaluation command behind the `rseval` CLI.

One run goes:
  snippet -> Cargo.toml + src/main.rs -> temporary project
  -> cached target/ moved in -> cargo build -> executable copied out
  -> target/ moved back to the cache -> executable run -> exit code

Diagnostics go through the structured logger on stderr. Stdout is only
written to for --dry-run, where the generated files are the output.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rseval.cli.exit_codes import (
    CONFIG_ERROR,
    NO_EXIT_STATUS,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
)
from rseval.config.exceptions import ConfigError
from rseval.config.loader import load_config
from rseval.config.schema import RsevalConfig, default_config
from rseval.errors import RsevalError, SnippetInputError
from rseval.logging.logger import get_logger
from rseval.project.cache import ArtifactCache
from rseval.project.materializer import ProjectContext
from rseval.runner.driver import build_project, evaluate, run_binary, stage_binary
from rseval.runner.models import BuildResult, EvalOptions, EvalOutcome, RunResult
from rseval.runtime.bootstrap import bootstrap
from rseval.runtime.environment import find_cargo
from rseval.snippet.dependencies import make_manifest
from rseval.snippet.wrapper import make_source_code

logger = get_logger(__name__)


def read_snippet(snippet: Optional[str]) -> str:
    """
    Return the snippet from the command line, or read stdin to the end.

    Raises:
        SnippetInputError: If stdin cannot be read.
    """
    if snippet is not None:
        return snippet
    try:
        return sys.stdin.read()
    except (OSError, UnicodeDecodeError) as err:
        raise SnippetInputError(f"Cannot read snippet from standard input: {err}") from err


def resolve_options(args: argparse.Namespace, config: RsevalConfig) -> EvalOptions:
    """Command-line switches turn options on; the config file supplies the rest."""
    return EvalOptions(
        print_result=args.print_result,
        quiet=args.quiet or config.toolchain.quiet,
        release=args.release or config.toolchain.release,
    )


def resolve_exit_code(result: BuildResult | RunResult) -> int:
    """Pass the child's exit code through, or report a signal death as NO_EXIT_STATUS."""
    if result.exit_code is not None:
        return result.exit_code
    logger.error(
        "Process terminated by signal",
        extra={"signal": result.signal},
    )
    return NO_EXIT_STATUS


def run_in_project(
    manifest: str,
    source_code: str,
    options: EvalOptions,
    config: RsevalConfig,
    cache: Optional[ArtifactCache],
) -> EvalOutcome:
    """
    Materialize the project and evaluate it, with the cached target/ on loan.

    The cache lock, when enabled, is held from restore to save so a second
    rseval can't grab the slot halfway through. The executable is staged
    out of target/ before the save, so the snippet runs with the lock
    already released. The project directory is removed on the way out no
    matter what happened.
    """
    package_name = config.project.package_name
    with ProjectContext(manifest, source_code, prefix=config.project.temp_prefix) as project:
        if cache is None:
            return evaluate(project, options, config.toolchain, package_name)

        executable = None
        with cache.locked():
            cache.restore(project)
            try:
                build = build_project(project, options, config.toolchain)
                if build.success:
                    executable = stage_binary(project, package_name, options.release)
            finally:
                cache.save(project)

        if executable is None:
            return EvalOutcome(build=build)
        return EvalOutcome(build=build, run=run_binary(executable, config.toolchain))


def _load(args: argparse.Namespace) -> RsevalConfig:
    if args.config is None:
        return default_config()
    return load_config(Path(args.config))


def _write_dry_run(manifest: str, source_code: str) -> None:
    sys.stdout.write("# Cargo.toml\n")
    sys.stdout.write(manifest)
    sys.stdout.write("\n# src/main.rs\n")
    sys.stdout.write(source_code)
    sys.stdout.write("\n")
    sys.stdout.flush()


def handle_eval(args: argparse.Namespace) -> int:
    """Evaluate one snippet and return the exit code the process should end with."""
    try:
        config = _load(args)
    except ConfigError as err:
        logger.error("Configuration error", extra={"error": str(err)})
        return CONFIG_ERROR

    bootstrap(config, log_level=args.log_level)

    cache = None
    if config.cache.enabled and not args.no_cache:
        cache = ArtifactCache.from_config(config.cache)

    if args.clear_cache:
        cache = cache or ArtifactCache.from_config(config.cache)
        try:
            with cache.locked():
                cleared = cache.clear()
        except RsevalError as err:
            logger.error("Cannot clear cache", extra={"error": str(err)})
            return RUNTIME_ERROR
        logger.info("Cache clear finished", extra={"cleared": cleared, "slot": str(cache.slot)})
        return SUCCESS

    try:
        snippet = read_snippet(args.snippet)
    except SnippetInputError as err:
        logger.error("Cannot read snippet", extra={"error": str(err)})
        return USER_ERROR

    options = resolve_options(args, config)
    manifest = make_manifest(snippet, config.project)
    source_code = make_source_code(snippet, print_result=options.print_result)

    if args.dry_run:
        _write_dry_run(manifest, source_code)
        return SUCCESS

    if find_cargo(config.toolchain.cargo) is None:
        logger.error(
            "cargo not found, is Rust installed?",
            extra={"cargo": config.toolchain.cargo},
        )
        return RUNTIME_ERROR

    try:
        outcome = run_in_project(manifest, source_code, options, config, cache)
    except RsevalError as err:
        logger.error("Evaluation failed", extra={"error": str(err)})
        return RUNTIME_ERROR

    return resolve_exit_code(outcome.final)
