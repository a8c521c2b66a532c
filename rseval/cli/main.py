# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for rseval.

A single command, no subcommands. Flags only add behaviour.

Usage:
    rseval 'println!("{}", 1 + 1)'
    rseval -p '(1..=10).sum::<u32>()'
    echo 'extern crate rand; // 0.8
    println!("{}", rand::random::<u8>());' | rseval -q
    rseval --config rseval.yaml --release 'fn main() { println!("hi"); }'
"""

import argparse
import sys

from rseval import __version__
from rseval.cli.commands import handle_eval


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Separate from main() so tests can poke at it."""
    parser = argparse.ArgumentParser(
        prog="rseval",
        description="Evaluate a Rust code snippet.",
    )
    parser.add_argument(
        "snippet",
        nargs="?",
        default=None,
        metavar="SNIPPET",
        help="Rust code snippet to evaluate. If omitted, the snippet is read from standard input.",
    )
    parser.add_argument(
        "-p",
        "--print-result",
        action="store_true",
        default=False,
        dest="print_result",
        help='Print the evaluation result using `println!("{:?}", result)`.',
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Don't show cargo's build messages.",
    )
    parser.add_argument(
        "-r",
        "--release",
        action="store_true",
        default=False,
        help="Build with optimizations (cargo's release profile).",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (logs go to stderr).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Print the generated Cargo.toml and src/main.rs instead of building.",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        default=False,
        dest="no_cache",
        help="Build from an empty target directory and leave the cache alone.",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        dest="clear_cache",
        help="Delete the cached target directory and exit.",
    )
    return parser


def main() -> None:
    """Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to."""
    args = build_parser().parse_args()
    sys.exit(handle_eval(args))


if __name__ == "__main__":
    main()
