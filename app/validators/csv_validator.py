"""
app/validators/csv_validator.py

Row-level identity classification and count parsing for CSV processing.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Sequence

from app.config import DEFAULT_MISSING_ID_PREFIX, DEFAULT_TEST_USER_IDS
from app.domain.campaign_analytics import IdentityClassification, IdentityKind
from app.parsing.csv_line_parser import clean_field

# Leading optional sign and digits, the same prefix a lenient integer parse accepts.
_LEADING_INTEGER = re.compile(r"[+-]?\d+")


class CSVRowValidator:
    """
    Classifies row identities and parses counted cells.

    Parsing never fails: a blank, missing or non-numeric cell counts as zero.
    """

    def __init__(
        self,
        *,
        test_user_ids: Iterable[str] = DEFAULT_TEST_USER_IDS,
        missing_id_prefix: str = DEFAULT_MISSING_ID_PREFIX,
    ) -> None:
        self._test_user_ids = frozenset(test_user_ids)
        self._missing_id_prefix = missing_id_prefix

    def is_blank_line(self, line: str) -> bool:
        return self._is_blank(line)

    def classify_identity(self, raw_identity: str | None) -> IdentityClassification | None:
        """
        Classify one identity cell, or return None when it is empty.

        The test-set and missing-prefix checks are independent: a prefixed
        identity that is also configured as a test identity is classified as
        test and still reports its missing suffix.
        """

        identity = clean_field(raw_identity)
        if not identity:
            return None

        missing_suffix: str | None = None
        if self._missing_id_prefix and identity.startswith(self._missing_id_prefix):
            missing_suffix = identity[len(self._missing_id_prefix):]

        if identity in self._test_user_ids:
            kind = IdentityKind.TEST
        elif missing_suffix is not None:
            kind = IdentityKind.MISSING
        else:
            kind = IdentityKind.REAL

        return IdentityClassification(kind=kind, identity=identity, missing_suffix=missing_suffix)

    def parse_count(self, value: str | None) -> int:
        """
        Parse a counted cell as an integer, falling back to zero.

        Only the leading integer is read, so ``"3.7"`` is 3 and ``"12abc"`` is 12.
        """

        cleaned = clean_field(value)
        if not cleaned:
            return 0
        match = _LEADING_INTEGER.match(cleaned)
        if match is None:
            return 0
        return int(match.group(0))

    def cell_count(self, fields: Sequence[str], index: int) -> int:
        """
        Parse the counted cell at *index*, treating a short row as zero.
        """

        if index < 0 or index >= len(fields):
            return 0
        return self.parse_count(fields[index])

    def cell_value(self, fields: Sequence[str], index: int) -> str | None:
        if index < 0 or index >= len(fields):
            return None
        return fields[index]

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""
