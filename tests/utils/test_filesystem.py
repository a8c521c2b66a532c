# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for filesystem utilities: atomic writes, directory moves, path checks.
"""

import errno
from pathlib import Path

import pytest

from rseval.utils.filesystem import atomic_write, move_directory
from rseval.utils.paths import ensure_directory


class TestAtomicWrite:
    def test_writes_content_successfully(self, tmp_path: Path) -> None:
        target = tmp_path / "Cargo.toml"
        atomic_write(target, "[package]\n")
        assert target.read_text(encoding="utf-8") == "[package]\n"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "src" / "main.rs"
        atomic_write(target, "fn main() {}")
        assert target.read_text(encoding="utf-8") == "fn main() {}"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "overwrite.txt"
        atomic_write(target, "first version")
        atomic_write(target, "second version")
        assert target.read_text(encoding="utf-8") == "second version"

    def test_no_leftover_temp_files_on_success(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "clean.txt", "clean write")
        assert list(tmp_path.glob(".rseval_tmp_*")) == []


class TestMoveDirectory:
    def test_moves_tree(self, tmp_path: Path) -> None:
        source = tmp_path / "target"
        (source / "debug").mkdir(parents=True)
        (source / "debug" / "bin").write_text("x", encoding="utf-8")
        destination = tmp_path / "cache" / "target"
        destination.parent.mkdir()

        move_directory(source, destination)

        assert not source.exists()
        assert (destination / "debug" / "bin").read_text(encoding="utf-8") == "x"

    def test_refuses_existing_destination(self, tmp_path: Path) -> None:
        source = tmp_path / "a"
        destination = tmp_path / "b"
        source.mkdir()
        destination.mkdir()

        with pytest.raises(FileExistsError):
            move_directory(source, destination)
        assert source.is_dir()

    def test_falls_back_to_copy_across_filesystems(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        source = tmp_path / "a"
        source.mkdir()
        (source / "f").write_text("data", encoding="utf-8")
        destination = tmp_path / "b"

        def _cross_device(self: Path, target: Path) -> Path:
            raise OSError(errno.EXDEV, "Invalid cross-device link")

        monkeypatch.setattr(Path, "rename", _cross_device)
        move_directory(source, destination)

        assert (destination / "f").read_text(encoding="utf-8") == "data"
        assert not source.exists()

    def test_other_rename_errors_propagate(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        source = tmp_path / "a"
        source.mkdir()

        def _denied(self: Path, target: Path) -> Path:
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(Path, "rename", _denied)
        with pytest.raises(PermissionError):
            move_directory(source, tmp_path / "b")


class TestPaths:
    def test_ensure_directory_is_idempotent(self, tmp_path: Path) -> None:
        target = tmp_path / "x" / "y"
        assert ensure_directory(target) == target
        assert ensure_directory(target).is_dir()
