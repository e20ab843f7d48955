"""
app/parsing/csv_line_parser.py

Line-level CSV tokenization for comma-separated, double-quote-escaped exports.
"""

from __future__ import annotations

import re

_LINE_BREAK = re.compile(r"\r?\n")

DELIMITER = ","
QUOTE = '"'


def split_csv_lines(text: str) -> list[str]:
    """
    Split raw file content into lines, keeping blank lines for the caller to skip.
    """

    return _LINE_BREAK.split(text)


def parse_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into its raw field strings.

    A double quote toggles quoted mode, in which the delimiter is literal
    content. A doubled quote inside quoted mode yields one literal quote.
    Unbalanced quoting never fails: whatever follows the last toggle stays in
    the current field. The last field is always emitted.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    position = 0
    length = len(line)

    while position < length:
        char = line[position]
        if char == QUOTE:
            if in_quotes and position + 1 < length and line[position + 1] == QUOTE:
                current.append(QUOTE)
                position += 1
            else:
                in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        position += 1

    fields.append("".join(current))
    return fields


def clean_field(value: str | None) -> str:
    """
    Trim whitespace and drop every double quote from a raw field.
    """

    if value is None:
        return ""
    return value.replace(QUOTE, "").strip()
