# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for rseval.

Every config section gets its own frozen pydantic model. The models use
pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

A config file is optional. Without one, `default_config()` builds the same
tree the models would produce from a file containing only
`global: {config_version: "1.0.0"}`.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_VERSION = "1.0.0"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Cargo package names: ASCII alphanumerics, '-' and '_'.
_PACKAGE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="WARNING",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}")
        return upper


class ProjectConfig(BaseModel):
    """
    Shape of the throwaway Cargo project generated for every snippet.

    The package name also names the built executable, so it decides where
    the binary shows up under target/.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    package_name: str = Field(
        default="rseval_temp",
        description="[package] name written to Cargo.toml",
    )
    package_version: str = Field(
        default="0.0.0",
        description="[package] version written to Cargo.toml",
    )
    edition: Optional[str] = Field(
        default=None,
        description="Optional Rust edition; omitted from Cargo.toml when unset",
    )
    temp_prefix: str = Field(
        default="rseval_temp",
        min_length=1,
        description="Prefix of the per-run temporary project directory",
    )

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        if not _PACKAGE_NAME_RE.match(value):
            raise ValueError(f"'{value}' is not a valid cargo package name")
        return value


class ToolchainConfig(BaseModel):
    """How cargo and the built binary get invoked."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    cargo: str = Field(
        default="cargo",
        min_length=1,
        description="cargo executable, either a name on PATH or an absolute path",
    )
    quiet: bool = Field(
        default=False,
        description="Pass --quiet to cargo build",
    )
    release: bool = Field(
        default=False,
        description="Build with the optimized release profile",
    )
    offline: bool = Field(
        default=False,
        description="Set CARGO_NET_OFFLINE so cargo never touches the network",
    )
    build_timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Kill cargo build after this many seconds; unset means wait forever",
    )
    run_timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Kill the snippet's binary after this many seconds; unset means wait forever",
    )


class CacheConfig(BaseModel):
    """Where the shared target/ directory lives between runs."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    enabled: bool = Field(
        default=True,
        description="Reuse target/ across runs",
    )
    root: Optional[str] = Field(
        default=None,
        description="Parent of the cache directory; defaults to the system temp dir",
    )
    directory_name: str = Field(
        default="rseval_cache",
        min_length=1,
        description="Name of the cache directory under the root",
    )
    lock: bool = Field(
        default=True,
        description="Hold an advisory file lock from restore to save",
    )

    @field_validator("directory_name")
    @classmethod
    def _check_directory_name(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError("directory_name must be a single path component")
        return value


class RsevalConfig(BaseModel):
    """
    Top-level config container.

    Only `global` is required in a file. Every other section falls back to
    its defaults when left out.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


def default_config() -> RsevalConfig:
    """The configuration used when no --config file is given."""
    return RsevalConfig.model_validate({"global": {"config_version": CONFIG_VERSION}})
