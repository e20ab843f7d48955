"""
app/parsing/labels.py

Human-readable labels and number formatting for report-facing values.
"""

from __future__ import annotations

import re

# Lowercase unless first or last word.
MINOR_WORDS = frozenset(
    {
        "a", "an", "and", "as", "at", "but", "by", "for", "if", "in",
        "nor", "of", "on", "or", "so", "the", "to", "up", "yet",
    }
)

UPPERCASE_ABBREVIATIONS = frozenset(
    {
        "tts", "ai", "api", "url", "html", "css", "js", "id", "ui", "ux",
        "seo", "cta", "roi", "kpi",
    }
)

_UNDERSCORES = re.compile(r"_+")
_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")


def to_title_case(value: str) -> str:
    """
    Title-case a snake_case column fragment, e.g. ``scene8_home_page`` -> ``Scene8 Home Page``.
    """

    words = _UNDERSCORES.sub(" ", value).split()
    titled: list[str] = []
    last = len(words) - 1
    for index, word in enumerate(words):
        lowered = word.lower()
        if lowered in UPPERCASE_ABBREVIATIONS:
            titled.append(lowered.upper())
        elif index in (0, last):
            titled.append(lowered.capitalize())
        elif lowered in MINOR_WORDS:
            titled.append(lowered)
        else:
            titled.append(lowered.capitalize())
    return " ".join(titled)


def format_number(value: int | float | str | None) -> str:
    """
    Format an integer with dots as thousands separators (``1234567`` -> ``1.234.567``).
    """

    if isinstance(value, bool) or value is None:
        number = 0
    elif isinstance(value, (int, float)):
        number = int(value)
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            number = 0
    return _THOUSANDS.sub(".", str(number))
