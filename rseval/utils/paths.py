# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Path helpers for rseval."""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.

    Args:
        path: Directory path to create.

    Returns:
        The same path, now guaranteed to exist.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
