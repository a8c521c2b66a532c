# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for rseval.

Writes go through a temp file in the target's directory followed by a
rename, so a crash leaves either the old file or the new one and never a
half-written Cargo.toml. Directory moves prefer a plain rename and only
fall back to copy-and-delete when the two paths sit on different
filesystems.
"""

import errno
import shutil
import tempfile
from pathlib import Path


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    The temp file lives in the same directory as the target so the final
    rename stays on one filesystem, which is what makes it atomic on POSIX.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False because the file has to survive closing so we can rename it.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".rseval_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def move_directory(source: Path, destination: Path) -> None:
    """
    Move a directory to a path that must not exist yet.

    A rename is tried first. If it fails with EXDEV (source and destination
    on different filesystems, e.g. a tmpfs /tmp and a cache root on disk),
    the tree is moved with shutil.move instead.

    Raises:
        FileExistsError: If the destination already exists.
        OSError: If the move fails.
    """
    if destination.exists():
        raise FileExistsError(f"Destination already exists: {destination}")

    try:
        source.rename(destination)
    except OSError as err:
        if err.errno != errno.EXDEV:
            raise
        shutil.move(str(source), str(destination))
