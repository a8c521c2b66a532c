# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Writes the throwaway Cargo project for a snippet.

Every run gets its own freshly created temporary directory with the
minimal layout cargo needs:

    <tmp>/rseval_temp_XXXXXX/
        Cargo.toml
        src/main.rs

The directory belongs to the current process only. ProjectContext removes
it when the run is over, whether the run succeeded or not.
"""

import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from rseval.errors import MaterializeError
from rseval.logging.logger import get_logger
from rseval.utils.filesystem import atomic_write

logger = get_logger(__name__)

MANIFEST_FILENAME = "Cargo.toml"
SOURCE_DIRNAME = "src"
SOURCE_FILENAME = "main.rs"
TARGET_DIRNAME = "target"


@dataclass(frozen=True)
class GeneratedProject:
    """Paths of one materialized Cargo project."""

    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILENAME

    @property
    def source_path(self) -> Path:
        return self.root / SOURCE_DIRNAME / SOURCE_FILENAME

    @property
    def target_dir(self) -> Path:
        return self.root / TARGET_DIRNAME


def materialize_project(
    manifest: str,
    source_code: str,
    prefix: str = "rseval_temp",
    base_dir: Path | None = None,
) -> GeneratedProject:
    """
    Create a temporary directory and lay the Cargo project out inside it.

    Args:
        manifest: Complete Cargo.toml contents.
        source_code: Complete src/main.rs contents.
        prefix: Prefix for the temporary directory name.
        base_dir: Where to create the directory; defaults to the system temp dir.

    Returns:
        The generated project.

    Raises:
        MaterializeError: If any directory or file cannot be created. Whatever
                          was already created is removed before raising.
    """
    try:
        root = Path(tempfile.mkdtemp(
            prefix=f"{prefix}_",
            dir=str(base_dir) if base_dir else None,
        ))
    except OSError as err:
        raise MaterializeError(f"Cannot create temporary directory: {err}") from err

    project = GeneratedProject(root=root)

    try:
        atomic_write(project.manifest_path, manifest)
        project.source_path.parent.mkdir()
        atomic_write(project.source_path, source_code)
    except OSError as err:
        shutil.rmtree(root, ignore_errors=True)
        raise MaterializeError(f"Cannot write project files into {root}: {err}") from err

    logger.debug(
        "Project materialized",
        extra={"path": str(root), "source_bytes": len(source_code.encode("utf-8"))},
    )
    return project


def remove_project(project: GeneratedProject) -> None:
    """Remove a project directory and everything inside it, target/ included."""
    if project.root.is_dir():
        shutil.rmtree(project.root, ignore_errors=True)
        logger.debug("Project removed", extra={"path": str(project.root)})


class ProjectContext:
    """
    Context manager that materializes a project on enter and removes it on exit.

    Usage:
        with ProjectContext(manifest, source_code) as project:
            # run cargo in project.root
        # directory is gone here, even if the block raised
    """

    def __init__(
        self,
        manifest: str,
        source_code: str,
        prefix: str = "rseval_temp",
        base_dir: Path | None = None,
    ) -> None:
        self._manifest = manifest
        self._source_code = source_code
        self._prefix = prefix
        self._base_dir = base_dir
        self._project: GeneratedProject | None = None

    def __enter__(self) -> GeneratedProject:
        self._project = materialize_project(
            self._manifest, self._source_code, self._prefix, self._base_dir,
        )
        return self._project

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._project is not None:
            remove_project(self._project)
