# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Turns a snippet into a complete `src/main.rs`.

Most snippets are a handful of statements or a single expression, so they
get wrapped in a synthesized `fn main()`. `extern crate` declarations are
only legal at module level, which is why they are pulled out of the body
and placed above the function.

A snippet that already has its own `fn main()` is left exactly as written.
The check is a regex over raw lines, so a `fn main()` sitting inside a
string literal or a block comment also counts. A `#[macro_use]` attribute
stays behind in the body when its declaration is hoisted.
"""

import re

from rseval.snippet.dependencies import DECLARATION_PATTERN

# Rustdoc-style hidden lines: "# " at the very start of a line.
_HIDDEN_LINE_RE = re.compile(r"(?m)^# ")
_ENTRY_POINT_RE = re.compile(r"(?m)^\s*fn +main *\( *\)")
_DECLARATION_RE = re.compile(f"({DECLARATION_PATTERN})")


def strip_hidden_lines(text: str) -> str:
    """Drop the leading "# " marker from every line that has one."""
    return _HIDDEN_LINE_RE.sub("", text)


def has_entry_point(text: str) -> bool:
    """True when some line looks like the start of `fn main()`."""
    return _ENTRY_POINT_RE.search(text) is not None


def hoist_declarations(text: str) -> tuple[str, str]:
    """
    Split `extern crate` declarations out of the snippet.

    Returns (declarations, body): every declaration on its own line, in
    order, and the snippet with those declarations removed.
    """
    declarations = "".join(f"{match.group(1)}\n" for match in _DECLARATION_RE.finditer(text))
    body = _DECLARATION_RE.sub("", text)
    return declarations, body


def wrap_print_result(body: str) -> str:
    """
    Evaluate the body as a block and print its value with `{:?}`.

    The body gets lines of its own so a trailing `//` comment can't swallow
    the closing `});`.
    """
    return 'println!("{:?}", {\n' + body + "\n});"


def make_source_code(text: str, print_result: bool = False) -> str:
    """
    Build the contents of src/main.rs from a snippet.

    Args:
        text: The raw snippet.
        print_result: Print the value of the snippet's final expression.
                      Ignored when the snippet defines its own `fn main()`.

    Returns:
        The snippet itself if it already defines `fn main()` (after hidden
        lines are unmarked), otherwise the hoisted declarations followed by a
        single synthesized `fn main()` around the rest of the snippet.
    """
    text = strip_hidden_lines(text)

    if has_entry_point(text):
        return text

    declarations, body = hoist_declarations(text)
    if print_result:
        body = wrap_print_result(body)

    return f"\n{declarations}\nfn main() {{\n{body}\n}}"
