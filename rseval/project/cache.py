# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Reuse of cargo's target/ directory across runs.

Compiling dependencies is by far the slowest part of evaluating a snippet,
and most snippets pull in the same few crates. So instead of letting every
throwaway project start from an empty target/, one target/ directory is
parked in a fixed cache slot between runs:

    <tmp>/rseval_cache/
        .lock
        target/          <- the slot

Before the build, the slot is moved into the new project (creating an
empty one first if the slot is vacant), which hands cargo its incremental
state. After the build, the project's target/ is moved back, but only if
the slot is still vacant. If something else refilled it in the meantime,
the fresh directory is simply left in the project and deleted with it.

Everything is renames, so handing the directory back and forth is cheap.
While a build is running the slot is empty. Two concurrent runs would race
on that check-then-move, which is what CacheLock is for: it holds an
exclusive advisory lock on `.lock` from restore through save. With locking
turned off, concurrent runs fall back to the unguarded behaviour, where the
second run simply starts from an empty target/.
"""

import fcntl
import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import IO, Optional

from rseval.config.schema import CacheConfig
from rseval.errors import CacheError
from rseval.logging.logger import get_logger
from rseval.project.materializer import TARGET_DIRNAME, GeneratedProject
from rseval.utils.filesystem import move_directory
from rseval.utils.paths import ensure_directory

logger = get_logger(__name__)

LOCK_FILENAME = ".lock"


class CacheLock:
    """
    Exclusive advisory lock on the cache directory.

    Blocks until any other rseval process holding the lock releases it.
    When disabled, entering and leaving are no-ops.
    """

    def __init__(self, lock_path: Path, enabled: bool = True) -> None:
        self._lock_path = lock_path
        self._enabled = enabled
        self._handle: Optional[IO[str]] = None

    def __enter__(self) -> "CacheLock":
        if not self._enabled:
            return self
        try:
            ensure_directory(self._lock_path.parent)
            self._handle = open(self._lock_path, "a", encoding="utf-8")
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_EX)
        except OSError as err:
            if self._handle is not None:
                self._handle.close()
                self._handle = None
            raise CacheError(f"Cannot lock cache directory {self._lock_path.parent}: {err}") from err
        logger.debug("Cache lock acquired", extra={"lock": str(self._lock_path)})
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None
        logger.debug("Cache lock released", extra={"lock": str(self._lock_path)})


class ArtifactCache:
    """The fixed, process-wide home of one target/ directory."""

    def __init__(self, root: Path, directory_name: str = "rseval_cache", lock: bool = True) -> None:
        self._directory = root / directory_name
        self._lock_enabled = lock

    @classmethod
    def from_config(cls, config: CacheConfig) -> "ArtifactCache":
        root = Path(config.root) if config.root is not None else Path(tempfile.gettempdir())
        return cls(root, config.directory_name, lock=config.lock)

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def slot(self) -> Path:
        return self._directory / TARGET_DIRNAME

    def locked(self) -> CacheLock:
        """Lock to hold from restore() through save()."""
        return CacheLock(self._directory / LOCK_FILENAME, enabled=self._lock_enabled)

    def restore(self, project: GeneratedProject) -> None:
        """
        Move the cached target/ into the project, creating an empty one first if needed.

        Raises:
            CacheError: If the slot cannot be created or moved.
        """
        try:
            ensure_directory(self.slot)
            move_directory(self.slot, project.target_dir)
        except OSError as err:
            raise CacheError(f"Cannot move {self.slot} into {project.root}: {err}") from err

        logger.debug(
            "Cache restored",
            extra={"slot": str(self.slot), "target_dir": str(project.target_dir)},
        )

    def save(self, project: GeneratedProject) -> bool:
        """
        Move the project's target/ back into the slot if the slot is still vacant.

        Returns:
            True if the directory was moved into the slot, False if it was
            left in the project.

        Raises:
            CacheError: If the move itself fails.
        """
        if not project.target_dir.is_dir():
            logger.warning(
                "Project has no target directory, nothing to cache",
                extra={"target_dir": str(project.target_dir)},
            )
            return False

        if self.slot.exists():
            logger.info(
                "Cache slot was refilled during the build, leaving target directory behind",
                extra={"slot": str(self.slot)},
            )
            return False

        try:
            ensure_directory(self._directory)
            move_directory(project.target_dir, self.slot)
        except FileExistsError:
            logger.info("Cache slot was refilled during the save", extra={"slot": str(self.slot)})
            return False
        except OSError as err:
            raise CacheError(f"Cannot move {project.target_dir} into {self.slot}: {err}") from err

        logger.debug("Cache saved", extra={"slot": str(self.slot)})
        return True

    def clear(self) -> bool:
        """
        Delete whatever target/ is parked in the slot.

        Returns:
            True if there was something to delete.

        Raises:
            CacheError: If the directory exists but cannot be removed.
        """
        if not self.slot.exists():
            return False
        try:
            shutil.rmtree(self.slot)
        except OSError as err:
            raise CacheError(f"Cannot remove {self.slot}: {err}") from err
        logger.info("Cache cleared", extra={"slot": str(self.slot)})
        return True
