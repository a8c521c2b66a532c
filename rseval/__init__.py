# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
rseval: evaluate a Rust snippet with a throwaway Cargo project.

Subsystems:
  - snippet: crate dependency extraction and `fn main()` wrapping
  - project: temporary Cargo project layout and the shared target/ cache
  - runner: `cargo build` and running the produced binary
  - cli: command-line entry point
"""

__version__ = "0.1.0"
