# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Crate dependency extraction for snippets.

A snippet pulls in a crate the 2015-edition way, with `extern crate name;`.
A trailing line comment can pin a version or replace the whole Cargo.toml
entry:

    extern crate rand;                         ->  rand = "*"
    extern crate rand; // 0.8                  ->  rand = "0.8"
    extern crate rand; // rand = { version = "0.8", features = ["small_rng"] }

Matching is line-oriented regex work, not parsing. A declaration inside a
string literal or a block comment is picked up like any other.
"""

import re
from dataclasses import dataclass
from typing import Optional

from rseval.config.schema import ProjectConfig

# Shared with the wrapper, which hoists exactly these declarations.
DECLARATION_PATTERN = r"extern\s+crate\s+[a-z0-9_]+\s*;"

_DECLARATION_RE = re.compile(r"extern\s+crate\s+([a-z0-9_]+)\s*;(?:[ \t]*//(.*))?")


@dataclass(frozen=True)
class DependencyDeclaration:
    """One `extern crate` line and the specifier from its trailing comment, if any."""

    name: str
    specifier: Optional[str] = None

    def manifest_line(self) -> str:
        """Render the [dependencies] entry for this crate."""
        if self.specifier is None:
            return f'{self.name} = "*"'
        if "=" in self.specifier:
            # A full `key = value` entry, taken as written.
            return self.specifier
        if _is_quoted(self.specifier):
            return f"{self.name} = {self.specifier}"
        return f'{self.name} = "{self.specifier}"'


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'"


def extract_dependencies(text: str) -> list[DependencyDeclaration]:
    """
    Find every `extern crate` declaration in the snippet, in order of appearance.

    Every match yields an entry, so a crate declared twice shows up twice.
    Collapsing duplicates is left to `render_dependencies`.
    """
    declarations = []
    for match in _DECLARATION_RE.finditer(text):
        specifier = match.group(2)
        if specifier is not None:
            specifier = specifier.strip() or None
        declarations.append(DependencyDeclaration(name=match.group(1), specifier=specifier))
    return declarations


def _manifest_key(line: str) -> str:
    """The TOML key a rendered [dependencies] line assigns."""
    return line.split("=", 1)[0].strip().strip("\"'")


def render_dependencies(declarations: list[DependencyDeclaration]) -> str:
    """
    Render the body of the [dependencies] table.

    Cargo rejects a manifest with the same key twice, so lines are collapsed
    by the key they assign. That is usually the crate name, but an override
    comment can name another crate (`extern crate foo; // bar = "1"`). Each
    key keeps the position of its first line and the text of its last.
    """
    by_key: dict[str, str] = {}
    for declaration in declarations:
        line = declaration.manifest_line()
        by_key[_manifest_key(line)] = line
    return "\n".join(by_key.values())


def make_manifest(text: str, settings: ProjectConfig) -> str:
    """Build the complete Cargo.toml for a snippet."""
    package_lines = [
        "[package]",
        f'name = "{settings.package_name}"',
        f'version = "{settings.package_version}"',
    ]
    if settings.edition is not None:
        package_lines.append(f'edition = "{settings.edition}"')

    dependencies = render_dependencies(extract_dependencies(text))

    return "\n".join(package_lines) + "\n\n[dependencies]\n" + (
        dependencies + "\n" if dependencies else ""
    )
