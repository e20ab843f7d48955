"""
app/validators/mapping_validator.py

Validation for column schema resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured schema resolution error detail.
    """

    code: str
    message: str
    column: str | None = None
    context: dict[str, Any] | None = None


class SchemaError(ValueError):
    """
    Raised when a required column cannot be located in the header row.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    @property
    def missing_columns(self) -> tuple[str, ...]:
        return tuple(
            error.column
            for error in self.errors
            if error.code == "required_column_missing" and error.column
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "column": error.column,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class MappingValidator:
    """
    Validates that every required column role resolved to a header position.
    """

    def __init__(self, *, required_columns: Sequence[str]) -> None:
        self._required_columns = tuple(required_columns)

    def validate(
        self,
        *,
        resolved: Mapping[str, int | None],
        source_headers: Sequence[str],
    ) -> None:
        """
        Raise :class:`SchemaError` listing every required column that is missing.
        """

        errors: list[MappingErrorDetail] = []
        for column in self._required_columns:
            if resolved.get(column) is None:
                errors.append(
                    MappingErrorDetail(
                        code="required_column_missing",
                        message=f'Required column "{column}" not found in CSV.',
                        column=column,
                        context={"source_headers": list(source_headers)},
                    )
                )

        if errors:
            missing_csv = ", ".join(error.column for error in errors if error.column)
            raise SchemaError(
                message=f"Required columns not found in CSV: {missing_csv}.",
                errors=errors,
            )
