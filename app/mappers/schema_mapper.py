"""
app/mappers/schema_mapper.py

Column schema resolution for analytics CSV exports.
"""

from __future__ import annotations

from typing import Sequence

from app.config import DEFAULT_INTERACTION_COLUMNS
from app.domain.campaign_analytics import ColumnSchema, NamedColumn
from app.parsing.csv_line_parser import clean_field
from app.validators.mapping_validator import MappingValidator

IDENTITY_COLUMN = "uniqueid/id"
IMPRESSION_COLUMN = "impression_count"
FINISHED_COLUMN = "event_count_finished"

# Preference order: the first candidate present wins, wherever it sits in the header.
IDENTITY_CANDIDATES: tuple[str, ...] = ("uniqueid", "id")

REQUIRED_COLUMNS: tuple[str, ...] = (IDENTITY_COLUMN, IMPRESSION_COLUMN, FINISHED_COLUMN)

EVENT_COLUMN_PREFIX = "event_count_"

THUMBNAIL_COLUMN = "thumbnail_count"
VISIT_COLUMN = "visit_count"
PLAY_COLUMN = "play_count"


def normalize_header(header: str) -> str:
    """
    Normalize a column name for case-insensitive exact matching.
    """

    return clean_field(header).lower()


class SchemaMapper:
    """
    Resolves a header row into a :class:`ColumnSchema`.
    """

    def __init__(
        self,
        *,
        interaction_columns: Sequence[str] = DEFAULT_INTERACTION_COLUMNS,
        validator: MappingValidator | None = None,
    ) -> None:
        self._interaction_columns = tuple(interaction_columns)
        self._validator = validator or MappingValidator(required_columns=REQUIRED_COLUMNS)

    def resolve_schema(self, headers: Sequence[str]) -> ColumnSchema:
        """
        Locate required, optional, event and interaction columns.

        Raises
        ------
        SchemaError
            When the identity, impression or finished column is absent.
        """

        source_headers = tuple(clean_field(header) for header in headers)
        lookup: dict[str, int] = {}
        for index, header in enumerate(source_headers):
            lookup.setdefault(header.lower(), index)

        identity_index = next(
            (lookup[candidate] for candidate in IDENTITY_CANDIDATES if candidate in lookup),
            None,
        )
        resolved = {
            IDENTITY_COLUMN: identity_index,
            IMPRESSION_COLUMN: lookup.get(IMPRESSION_COLUMN),
            FINISHED_COLUMN: lookup.get(FINISHED_COLUMN),
        }
        self._validator.validate(resolved=resolved, source_headers=source_headers)

        return ColumnSchema(
            identity_index=resolved[IDENTITY_COLUMN],
            impression_index=resolved[IMPRESSION_COLUMN],
            finished_index=resolved[FINISHED_COLUMN],
            event_columns=self._find_event_columns(source_headers),
            interaction_columns=self._find_interaction_columns(lookup),
            thumbnail_index=lookup.get(THUMBNAIL_COLUMN),
            visit_index=lookup.get(VISIT_COLUMN),
            play_index=lookup.get(PLAY_COLUMN),
            headers=source_headers,
        )

    @staticmethod
    def _find_event_columns(source_headers: Sequence[str]) -> tuple[NamedColumn, ...]:
        return tuple(
            NamedColumn(name=header, index=index)
            for index, header in enumerate(source_headers)
            if header.lower().startswith(EVENT_COLUMN_PREFIX) and header.lower() != FINISHED_COLUMN
        )

    def _find_interaction_columns(self, lookup: dict[str, int]) -> tuple[NamedColumn, ...]:
        found: list[NamedColumn] = []
        for name in self._interaction_columns:
            index = lookup.get(normalize_header(name))
            if index is not None:
                found.append(NamedColumn(name=name, index=index))
        return tuple(found)
