"""
tests/test_csv_line_parser.py

Pytest unit tests for line tokenization.
"""

from __future__ import annotations

import pytest

from app.parsing.csv_line_parser import clean_field, parse_csv_line, split_csv_lines


class TestParseCSVLine:
    def test_plain_fields(self) -> None:
        assert parse_csv_line("U1,3,1,0") == ["U1", "3", "1", "0"]

    def test_quoted_field_keeps_delimiter_as_content(self) -> None:
        assert parse_csv_line('U1,"Hello, world",2') == ["U1", "Hello, world", "2"]

    def test_doubled_quote_inside_quotes_is_literal(self) -> None:
        assert parse_csv_line('"say ""hi""",1') == ['say "hi"', "1"]

    def test_trailing_delimiter_emits_empty_last_field(self) -> None:
        assert parse_csv_line("a,b,") == ["a", "b", ""]

    def test_single_field_line(self) -> None:
        assert parse_csv_line("lonely") == ["lonely"]

    def test_empty_line_yields_one_empty_field(self) -> None:
        assert parse_csv_line("") == [""]

    def test_unbalanced_quote_keeps_remainder_in_current_field(self) -> None:
        assert parse_csv_line('a,"b,c,d') == ["a", "b,c,d"]

    def test_whitespace_is_preserved(self) -> None:
        assert parse_csv_line(" a , b ") == [" a ", " b "]


class TestSplitLines:
    def test_handles_crlf_and_lf(self) -> None:
        assert split_csv_lines("h1,h2\r\nA,1\nB,2") == ["h1,h2", "A,1", "B,2"]

    def test_keeps_blank_lines(self) -> None:
        assert split_csv_lines("a\n\nb\n") == ["a", "", "b", ""]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('  "U1" ', "U1"),
        ('"MissingID-ab12"', "MissingID-ab12"),
        ("", ""),
        (None, ""),
    ],
)
def test_clean_field(raw: str | None, expected: str) -> None:
    assert clean_field(raw) == expected
