"""
app/services/aggregation_service.py

Single-pass metrics aggregation over tokenized CSV rows.

Translates the data lines of one analytics export into a
:class:`~app.domain.campaign_analytics.MetricsRecord`.

Inclusion policy
----------------
Rows whose identity is a configured test identity are excluded from:

    total_users, impressions, content finished, unique interactions,
    thumbnail / visit / play totals and uniques

but are included in every dynamic ``event_count_*`` column, both in its
sum and in its distinct-identity count.

A missing-identity row (``MissingID-<suffix>``) is reported in
``missing_ids`` / ``missing_id_count`` and otherwise aggregated like any
other row.

Uniqueness
----------
``unique_impressions``, ``unique_content_finishes`` and
``unique_interactions`` count qualifying rows (one increment per row).
Thumbnail, visit, play and event columns count distinct identities.

No per-row anomaly raises: short rows, blank identities and non-numeric
cells degrade to skip or zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from app.domain.campaign_analytics import ColumnSchema, MetricsRecord
from app.parsing.csv_line_parser import parse_csv_line
from app.validators.csv_validator import CSVRowValidator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal accumulators
# ---------------------------------------------------------------------------


@dataclass
class _CountTally:
    """Running total plus the distinct identities with a positive value."""

    total: int = 0
    identities: set[str] = field(default_factory=set)

    def add(self, identity: str, value: int) -> None:
        self.total += value
        if value > 0:
            self.identities.add(identity)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AggregationService:
    """
    Builds a :class:`MetricsRecord` from data lines in one linear pass.

    The service holds only immutable collaborators, so one instance can be
    reused across files; all accumulators are local to :meth:`aggregate`.

    Parameters
    ----------
    validator:
        Identity classifier and count parser. Carries the configured test
        identities and missing-identity prefix.
    log_skipped_rows:
        Emit a DEBUG line for every skipped data line.
    """

    def __init__(
        self,
        *,
        validator: CSVRowValidator | None = None,
        log_skipped_rows: bool = False,
    ) -> None:
        self._validator = validator or CSVRowValidator()
        self._log_skipped_rows = log_skipped_rows

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def aggregate(self, lines: Iterable[str], schema: ColumnSchema) -> MetricsRecord:
        """
        Aggregate every data line (header excluded) against *schema*.

        Returns
        -------
        MetricsRecord
            Optional total/unique pairs are ``None`` when their column is
            absent; ``unique_interactions`` is ``None`` when no interaction
            column was resolved.
        """
        validator = self._validator

        real_users: set[str] = set()
        found_test_users: dict[str, None] = {}
        missing_ids: list[str] = []

        total_impressions = 0
        unique_impressions = 0
        total_finished = 0
        unique_finishes = 0
        unique_interactions = 0

        thumbnails = _CountTally()
        visits = _CountTally()
        plays = _CountTally()
        events = {column.name: _CountTally() for column in schema.event_columns}

        rows_seen = 0
        rows_skipped = 0

        for line_number, line in enumerate(lines, start=2):
            if validator.is_blank_line(line):
                continue
            rows_seen += 1

            fields = parse_csv_line(line)
            if len(fields) <= 1:
                rows_skipped += 1
                self._log_skip(line_number, "too few fields")
                continue

            classification = validator.classify_identity(
                validator.cell_value(fields, schema.identity_index)
            )
            if classification is None:
                rows_skipped += 1
                self._log_skip(line_number, "empty identity")
                continue

            identity = classification.identity

            if classification.is_missing:
                missing_ids.append(classification.missing_suffix or "")

            if classification.is_test:
                found_test_users.setdefault(identity, None)
            else:
                real_users.add(identity)

                impressions = validator.cell_count(fields, schema.impression_index)
                if impressions > 0:
                    total_impressions += impressions
                    unique_impressions += 1

                finished = validator.cell_count(fields, schema.finished_index)
                total_finished += finished
                if finished > 0:
                    unique_finishes += 1

                if schema.interaction_columns:
                    interaction_sum = sum(
                        validator.cell_count(fields, column.index)
                        for column in schema.interaction_columns
                    )
                    if interaction_sum > 0:
                        unique_interactions += 1

                if schema.thumbnail_index is not None:
                    thumbnails.add(identity, validator.cell_count(fields, schema.thumbnail_index))
                if schema.visit_index is not None:
                    visits.add(identity, validator.cell_count(fields, schema.visit_index))
                if schema.play_index is not None:
                    plays.add(identity, validator.cell_count(fields, schema.play_index))

            for column in schema.event_columns:
                events[column.name].add(identity, validator.cell_count(fields, column.index))

        logger.debug(
            "aggregate rows=%d skipped=%d users=%d test_users=%d missing_ids=%d event_columns=%d",
            rows_seen,
            rows_skipped,
            len(real_users),
            len(found_test_users),
            len(missing_ids),
            len(events),
        )

        has_thumbnail = schema.thumbnail_index is not None
        has_visit = schema.visit_index is not None
        has_play = schema.play_index is not None

        return MetricsRecord(
            total_users=len(real_users),
            total_impressions=total_impressions,
            unique_impressions=unique_impressions,
            total_content_finished=total_finished,
            unique_content_finishes=unique_finishes,
            unique_interactions=unique_interactions if schema.interaction_columns else None,
            total_thumbnail_count=thumbnails.total if has_thumbnail else None,
            unique_thumbnail_count=len(thumbnails.identities) if has_thumbnail else None,
            total_visit_count=visits.total if has_visit else None,
            unique_visit_count=len(visits.identities) if has_visit else None,
            total_play_count=plays.total if has_play else None,
            unique_play_count=len(plays.identities) if has_play else None,
            event_sums={name: tally.total for name, tally in events.items()},
            event_unique_user_counts={name: len(tally.identities) for name, tally in events.items()},
            missing_ids=tuple(missing_ids),
            missing_id_count=len(missing_ids),
            found_test_users=tuple(found_test_users),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _log_skip(self, line_number: int, reason: str) -> None:
        if self._log_skipped_rows:
            logger.debug("Skipped CSV line=%d reason=%s", line_number, reason)
