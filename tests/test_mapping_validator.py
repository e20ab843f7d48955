from __future__ import annotations

import unittest

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaError


class TestMappingValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = MappingValidator(
            required_columns=("uniqueid/id", "impression_count", "event_count_finished"),
        )

    def test_raises_on_missing_required_columns(self) -> None:
        with self.assertRaises(SchemaError) as ctx:
            self.validator.validate(
                resolved={"uniqueid/id": 0, "impression_count": None},
                source_headers=("uniqueid", "clicks"),
            )

        self.assertEqual(
            ctx.exception.message,
            "Required columns not found in CSV: impression_count, event_count_finished.",
        )
        self.assertEqual(ctx.exception.missing_columns, ("impression_count", "event_count_finished"))
        context = ctx.exception.errors[0].context or {}
        self.assertEqual(context["source_headers"], ["uniqueid", "clicks"])

    def test_accepts_complete_resolution(self) -> None:
        self.validator.validate(
            resolved={"uniqueid/id": 0, "impression_count": 1, "event_count_finished": 2},
            source_headers=("uniqueid", "impression_count", "event_count_finished"),
        )

    def test_index_zero_counts_as_resolved(self) -> None:
        self.validator.validate(
            resolved={"uniqueid/id": 2, "impression_count": 0, "event_count_finished": 1},
            source_headers=("impression_count", "event_count_finished", "id"),
        )

    def test_error_payload_is_serializable(self) -> None:
        error = SchemaError(
            message="Required columns not found in CSV: impression_count.",
            errors=[
                MappingErrorDetail(
                    code="required_column_missing",
                    message='Required column "impression_count" not found in CSV.',
                    column="impression_count",
                )
            ],
        )

        payload = error.to_dict()

        self.assertEqual(payload["message"], "Required columns not found in CSV: impression_count.")
        self.assertEqual(payload["errors"][0]["column"], "impression_count")
        self.assertIsNone(payload["errors"][0]["context"])
        self.assertIsInstance(error, ValueError)


if __name__ == "__main__":
    unittest.main()
