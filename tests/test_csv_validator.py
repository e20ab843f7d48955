from __future__ import annotations

import unittest

from app.domain.campaign_analytics import IdentityKind
from app.validators.csv_validator import CSVRowValidator


class TestIdentityClassification(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = CSVRowValidator()

    def test_real_identity(self) -> None:
        result = self.validator.classify_identity(' "U1" ')

        assert result is not None
        self.assertEqual(result.kind, IdentityKind.REAL)
        self.assertEqual(result.identity, "U1")
        self.assertIsNone(result.missing_suffix)
        self.assertFalse(result.is_test)
        self.assertFalse(result.is_missing)

    def test_default_test_identities(self) -> None:
        for identity in ("X001", "PH123", "OMMATEST"):
            result = self.validator.classify_identity(identity)
            assert result is not None
            self.assertTrue(result.is_test, identity)

    def test_test_identity_match_is_exact(self) -> None:
        result = self.validator.classify_identity("x001")

        assert result is not None
        self.assertEqual(result.kind, IdentityKind.REAL)

    def test_missing_identity_reports_suffix(self) -> None:
        result = self.validator.classify_identity("MissingID-ab12")

        assert result is not None
        self.assertEqual(result.kind, IdentityKind.MISSING)
        self.assertEqual(result.missing_suffix, "ab12")
        self.assertTrue(result.is_missing)

    def test_bare_prefix_has_empty_suffix(self) -> None:
        result = self.validator.classify_identity("MissingID-")

        assert result is not None
        self.assertEqual(result.missing_suffix, "")
        self.assertTrue(result.is_missing)

    def test_test_identity_with_missing_prefix_keeps_both_flags(self) -> None:
        validator = CSVRowValidator(test_user_ids=("MissingID-qa",))

        result = validator.classify_identity("MissingID-qa")

        assert result is not None
        self.assertEqual(result.kind, IdentityKind.TEST)
        self.assertTrue(result.is_test)
        self.assertEqual(result.missing_suffix, "qa")

    def test_empty_identity_returns_none(self) -> None:
        self.assertIsNone(self.validator.classify_identity('  ""  '))
        self.assertIsNone(self.validator.classify_identity(None))

    def test_configured_prefix(self) -> None:
        validator = CSVRowValidator(missing_id_prefix="NOID:")

        result = validator.classify_identity("NOID:42")

        assert result is not None
        self.assertEqual(result.missing_suffix, "42")
        self.assertFalse(validator.classify_identity("MissingID-42").is_missing)


class TestCountParsing(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = CSVRowValidator()

    def test_lenient_integer_parsing(self) -> None:
        cases = {
            "3": 3,
            ' "7" ': 7,
            "3.7": 3,
            "12abc": 12,
            "-2": -2,
            "+4": 4,
            "abc": 0,
            "": 0,
            None: 0,
        }
        for raw, expected in cases.items():
            self.assertEqual(self.validator.parse_count(raw), expected, raw)

    def test_cell_count_out_of_range_is_zero(self) -> None:
        fields = ["U1", "5"]

        self.assertEqual(self.validator.cell_count(fields, 1), 5)
        self.assertEqual(self.validator.cell_count(fields, 2), 0)
        self.assertIsNone(self.validator.cell_value(fields, 9))

    def test_blank_line_detection(self) -> None:
        self.assertTrue(self.validator.is_blank_line("   "))
        self.assertTrue(self.validator.is_blank_line(""))
        self.assertFalse(self.validator.is_blank_line(","))


if __name__ == "__main__":
    unittest.main()
