from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st

from gentle_format import FormatterConfig, format_document
from gentle_format.detect import (
    BARE_LF_PATTERN,
    detect_indent_style,
    detect_line_ending,
    split_lines,
)
from gentle_format.models import LexicalContext
from gentle_format.scanner import scan_line

SOURCE_ALPHABET = (
    string.ascii_letters[:8] + string.digits[:3] + "{}()\"'@$/*\\=+-&|?!<>;_ \t\r\n\x00\x1c"
)
STRING_BODY_ALPHABET = string.ascii_letters[:8] + "{}()$@/*'=+-&|?!<>; "

source_text = st.text(alphabet=SOURCE_ALPHABET, max_size=200)


@given(source_text)
def test_formatting_is_idempotent(text: str):
    once = format_document(text)
    assert format_document(once) == once


@given(source_text)
def test_formatting_without_spacing_is_idempotent(text: str):
    config = FormatterConfig(operator_spacing=False, keyword_spacing=False)
    once = format_document(text, config)
    assert format_document(once, config) == once


@given(source_text)
def test_disabled_formatting_returns_input(text: str):
    assert format_document(text, FormatterConfig(enabled=False)) is text


@given(source_text)
def test_line_count_is_preserved(text: str):
    assert len(split_lines(format_document(text))) == len(split_lines(text))


@given(source_text)
def test_output_uses_a_single_line_ending(text: str):
    formatted = format_document(text)

    if detect_line_ending(text) == "\r\n":
        assert not BARE_LF_PATTERN.search(formatted)
    else:
        assert "\r\n" not in formatted


@given(source_text)
def test_detectors_return_known_values(text: str):
    assert detect_line_ending(text) in ("\n", "\r\n")
    assert detect_indent_style(text) in ("\t", "    ")


@given(
    st.text(alphabet=SOURCE_ALPHABET.replace("\r", "").replace("\n", ""), max_size=80),
    st.sampled_from(list(LexicalContext)),
    st.integers(min_value=0, max_value=5),
)
def test_scan_depth_never_negative(line: str, context: LexicalContext, depth: int):
    scan = scan_line(line, context, depth)

    assert scan.depth >= 0
    assert scan.context is not LexicalContext.SINGLE_LINE_COMMENT
    for start, end in scan.code_spans:
        assert 0 <= start < end <= len(line)


@given(st.text(alphabet=STRING_BODY_ALPHABET, max_size=40))
def test_braces_inside_strings_are_inert(body: str):
    text = f'{{\nx = "{body}";\ny();\n}}'

    lines = format_document(text).split("\n")

    assert lines[2] == "\ty();"
    assert lines[3] == "}"
