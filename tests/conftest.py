# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for rseval tests.

The star here is `fake_cargo`: a tiny shell script that understands just
enough of `cargo build` to stand in for the real thing. It reads the
package name from Cargo.toml, writes an executable into
<target-dir>/<profile>/<name>, and bumps a build counter inside target/ so
tests can tell a reused target directory from a fresh one.

Environment knobs (set with monkeypatch.setenv):
  FAKE_CARGO_LOG    file that receives one line of arguments per invocation
  FAKE_CARGO_EXIT   make the build fail with this exit code
  FAKE_RUN_EXIT     exit code of the produced binary
  FAKE_RUN_SIGNAL   the produced binary kills itself with this signal
"""

import logging
import sys
import textwrap
from pathlib import Path

import pytest

_FAKE_CARGO = textwrap.dedent("""\
    #!/bin/sh
    echo "$@" >> "${FAKE_CARGO_LOG:-/dev/null}"
    manifest=""
    target=""
    profile=debug
    while [ $# -gt 0 ]; do
      case "$1" in
        --manifest-path) manifest="$2"; shift ;;
        --target-dir) target="$2"; shift ;;
        --release) profile=release ;;
      esac
      shift
    done
    mkdir -p "$target"
    count=$(cat "$target/.builds" 2>/dev/null || echo 0)
    echo $((count + 1)) > "$target/.builds"
    if [ -n "$FAKE_CARGO_EXIT" ] && [ "$FAKE_CARGO_EXIT" != "0" ]; then
      exit "$FAKE_CARGO_EXIT"
    fi
    name=$(sed -n 's/^name = "\\(.*\\)"$/\\1/p' "$manifest" | head -n 1)
    mkdir -p "$target/$profile"
    cat > "$target/$profile/$name" <<'BIN'
    #!/bin/sh
    if [ -n "$FAKE_RUN_SIGNAL" ]; then
      kill -"$FAKE_RUN_SIGNAL" $$
    fi
    echo "snippet ran in $(pwd)"
    exit "${FAKE_RUN_EXIT:-0}"
    BIN
    chmod +x "$target/$profile/$name"
""")


@pytest.fixture()
def fake_cargo(tmp_path: Path) -> Path:
    """Write the fake cargo script and return its absolute path."""
    if sys.platform == "win32":
        pytest.skip("fake cargo is a POSIX shell script")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    cargo = bin_dir / "cargo"
    cargo.write_text(_FAKE_CARGO, encoding="utf-8")
    cargo.chmod(0o755)
    return cargo


@pytest.fixture()
def cargo_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route the fake cargo's argument log into a temp file."""
    log = tmp_path / "cargo.log"
    monkeypatch.setenv("FAKE_CARGO_LOG", str(log))
    return log


@pytest.fixture()
def cache_root(tmp_path: Path) -> Path:
    """A private cache root so tests never touch the real system temp cache."""
    root = tmp_path / "cache_root"
    root.mkdir()
    return root


@pytest.fixture()
def tmp_config_file(tmp_path: Path, fake_cargo: Path, cache_root: Path) -> Path:
    """A config file wired to the fake cargo and the private cache root."""
    config_content = textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          log_level: "WARNING"
        toolchain:
          cargo: "{fake_cargo}"
        cache:
          root: "{cache_root}"
    """)
    config_file = tmp_path / "rseval.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture(autouse=True)
def _reset_loggers() -> None:
    """
    Drop every rseval handler after each test.

    Handlers hold on to whatever sys.stderr was when they were created, which
    under capsys is a capture buffer that goes away with the test.
    """
    yield  # type: ignore[misc]
    for name in list(logging.Logger.manager.loggerDict):
        if name == "rseval" or name.startswith("rseval."):
            logging.getLogger(name).handlers.clear()
