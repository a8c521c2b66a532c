# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for turning snippets into src/main.rs.

The rules under test:
  - "# " hidden-line markers are removed, and removing them twice changes nothing
  - a snippet with its own `fn main()` comes back untouched, whatever the flags
  - otherwise declarations are hoisted and everything else lands in one `fn main()`
"""

import re

import pytest

from rseval.snippet.wrapper import (
    has_entry_point,
    hoist_declarations,
    make_source_code,
    strip_hidden_lines,
)


def _count_mains(source: str) -> int:
    return len(re.findall(r"fn main\(\)", source))


class TestStripHiddenLines:
    def test_removes_marker_at_line_start(self) -> None:
        assert strip_hidden_lines("# let x = 1;\nx") == "let x = 1;\nx"

    def test_leaves_attributes_alone(self) -> None:
        assert strip_hidden_lines("#[derive(Debug)]") == "#[derive(Debug)]"

    def test_leaves_indented_hash_alone(self) -> None:
        assert strip_hidden_lines("  # not hidden") == "  # not hidden"

    @pytest.mark.parametrize(
        "text",
        ["no markers", "#x\n#[test]\n  # y", "let a = 1; # b"],
    )
    def test_text_without_markers_is_unchanged(self, text: str) -> None:
        assert strip_hidden_lines(text) == text

    def test_idempotent_on_already_stripped_text(self) -> None:
        stripped = strip_hidden_lines("# let a = 1;\n# let b = 2;\na + b")
        assert strip_hidden_lines(stripped) == stripped


class TestHasEntryPoint:
    @pytest.mark.parametrize(
        "text",
        [
            "fn main() { a(); }",
            "    fn main() {}",
            "use std::io;\nfn  main ( ) {\n}",
            "# fn main() {}",
        ],
    )
    def test_detects_main(self, text: str) -> None:
        assert has_entry_point(strip_hidden_lines(text))

    @pytest.mark.parametrize(
        "text",
        [
            'println!("hi")',
            "fn main_helper() {}",
            "fn mainly() {}",
            "pub fn main() {}",
            "fn main(args: Vec<String>) {}",
        ],
    )
    def test_ignores_non_entry_points(self, text: str) -> None:
        assert not has_entry_point(text)

    def test_main_inside_string_literal_counts(self) -> None:
        # Line-oriented matching: a known false positive.
        assert has_entry_point('let s = "\nfn main() {}\n";')


class TestHoistDeclarations:
    def test_splits_declarations_from_body(self) -> None:
        declarations, body = hoist_declarations("extern crate foo; foo::go();")
        assert declarations == "extern crate foo;\n"
        assert body == " foo::go();"

    def test_comment_stays_in_body(self) -> None:
        declarations, body = hoist_declarations('extern crate foo; // foo = "1.2"\nfoo::go();')
        assert declarations == "extern crate foo;\n"
        assert '// foo = "1.2"' in body
        assert "extern crate" not in body

    def test_no_declarations(self) -> None:
        assert hoist_declarations("1 + 1") == ("", "1 + 1")


class TestMakeSourceCode:
    def test_plain_snippet_is_wrapped(self) -> None:
        source = make_source_code('println!("hi")')
        assert source == '\n\nfn main() {\nprintln!("hi")\n}'

    def test_declaration_is_hoisted_above_main(self) -> None:
        source = make_source_code("extern crate foo; foo::go();")

        assert source == "\nextern crate foo;\n\nfn main() {\n foo::go();\n}"
        assert source.index("extern crate foo;") < source.index("fn main()")

    def test_exactly_one_main_and_content_preserved(self) -> None:
        text = "extern crate a;\nlet x = a::f();\nextern crate b;\nb::g(x);"
        source = make_source_code(text)

        assert _count_mains(source) == 1
        main_at = source.index("fn main()")
        assert source.index("extern crate a;") < main_at
        assert source.index("extern crate b;") < main_at
        body = source[main_at:]
        assert "let x = a::f();" in body
        assert "b::g(x);" in body
        assert "extern crate" not in body

    def test_print_result_wraps_body_in_block(self) -> None:
        source = make_source_code("1 + 1", print_result=True)
        assert 'println!("{:?}", {\n1 + 1\n});' in source
        assert _count_mains(source) == 1

    def test_print_result_keeps_declarations_outside(self) -> None:
        source = make_source_code("extern crate foo;\nfoo::value()", print_result=True)
        main_at = source.index("fn main()")
        assert source.index("extern crate foo;") < main_at
        assert 'println!("{:?}", {\n\nfoo::value()\n});' in source

    def test_print_result_survives_trailing_comments(self) -> None:
        text = 'extern crate foo; // foo = "1.2"\nfoo::go()  // done'
        source = make_source_code(text, print_result=True)

        # The closing of the print block and of main sit on uncommented lines.
        lines = source.splitlines()
        assert lines[-2:] == ["});", "}"]
        for line in lines:
            if "//" in line:
                assert "});" not in line.split("//", 1)[1]

    @pytest.mark.parametrize("print_result", [False, True])
    def test_snippet_with_main_is_untouched(self, print_result: bool) -> None:
        text = "extern crate foo;\nfn main() { a(); }"
        assert make_source_code(text, print_result=print_result) == text

    def test_snippet_with_main_only_loses_hidden_markers(self) -> None:
        text = "# use std::fmt;\nfn main() { a(); }"
        assert make_source_code(text, print_result=True) == "use std::fmt;\nfn main() { a(); }"

    def test_hidden_lines_are_unmarked_inside_main(self) -> None:
        source = make_source_code("# let x = 2;\nx * 21", print_result=True)
        assert "# let" not in source
        assert "let x = 2;" in source
