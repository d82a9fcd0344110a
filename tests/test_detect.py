import pytest

from gentle_format.detect import (
    build_document,
    detect_indent_style,
    detect_line_ending,
    split_lines,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a\r\nb\r\nc\n", "\r\n"),
        ("a\nb\nc\r\n", "\n"),
        ("a\r\nb\n", "\r\n"),
        ("\r\n", "\r\n"),
        ("a\nb", "\n"),
        ("", "\n"),
        ("no newline", "\n"),
        ("a\rb\rc\n", "\n"),
    ],
)
def test_detect_line_ending(text: str, expected: str):
    assert detect_line_ending(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("class C\n{\n    int x;\n    int y;\n}", "    "),
        ("class C\n{\n\tint x;\n}", "\t"),
        ("\tx\n    y\n", "\t"),
        ("  two spaces\n  only\n", "\t"),
        ("\t    mixed\n    a\n", "\t"),
        ("", "\t"),
    ],
)
def test_detect_indent_style(text: str, expected: str):
    assert detect_indent_style(text) == expected


def test_split_lines_keeps_lone_carriage_returns():
    assert split_lines("a\r\nb\nc") == ["a", "b", "c"]
    assert split_lines("a\rb\n") == ["a\rb", ""]
    assert split_lines("") == [""]


def test_build_document():
    document = build_document("class C{\r\n    int x;\r\n}")

    assert document.lines == ["class C{", "    int x;", "}"]
    assert document.line_ending == "\r\n"
    assert document.indent_unit == "    "
