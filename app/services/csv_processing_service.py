"""
app/services/csv_processing_service.py

Service layer for the CSV processing workflow.

One call turns the full text of an analytics export plus its file name into
an immutable :class:`~app.domain.campaign_analytics.ProcessingResult`:

    1. split lines and tokenize the header row
    2. resolve the column schema (the only step that can fail)
    3. aggregate every data line in one pass
    4. parse campaign metadata from the file name

Nothing is kept between calls; callers thread the returned result into
whatever request or session context needs it.
"""

from __future__ import annotations

import logging
import time
from functools import lru_cache

from fastapi import UploadFile

from app.config import get_analytics_engine_settings, get_csv_processing_settings
from app.domain.campaign_analytics import ProcessingResult
from app.logging_utils import log_event
from app.mappers.schema_mapper import SchemaMapper
from app.parsing.csv_line_parser import parse_csv_line, split_csv_lines
from app.parsing.filename_parser import extract_campaign_metadata
from app.services.aggregation_service import AggregationService
from app.validators.csv_validator import CSVRowValidator
from app.validators.mapping_validator import SchemaError

logger = logging.getLogger(__name__)

MISSING_IDS_HEADER = "MissingID"

DEFAULT_UPLOAD_NAME = "upload.csv"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVUploadError(ValueError):
    """
    Raised when uploaded bytes cannot be read as CSV text.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVProcessingService:
    """
    Coordinates tokenization, schema resolution, aggregation and metadata parsing.
    """

    def __init__(
        self,
        *,
        mapper: SchemaMapper | None = None,
        aggregator: AggregationService | None = None,
        max_upload_bytes: int | None = None,
    ) -> None:
        self._mapper = mapper or SchemaMapper()
        self._aggregator = aggregator or AggregationService()
        self._max_upload_bytes = max_upload_bytes

    def process(self, csv_text: str, file_name: str) -> ProcessingResult:
        """
        Process the full text of one CSV export.

        Raises
        ------
        SchemaError
            When the identity, impression or finished column is missing.
            No partial result is produced.
        """
        started = time.perf_counter()
        lines = split_csv_lines(csv_text.lstrip("\ufeff"))
        log_event(logger, logging.DEBUG, "csv_processing_started", file_name=file_name, lines=len(lines))

        header_position = next(
            (position for position, line in enumerate(lines) if line.strip()),
            None,
        )
        headers = parse_csv_line(lines[header_position]) if header_position is not None else []

        try:
            schema = self._mapper.resolve_schema(headers)
        except SchemaError as exc:
            log_event(
                logger,
                logging.WARNING,
                "csv_schema_rejected",
                file_name=file_name,
                missing_columns=list(exc.missing_columns),
            )
            raise

        data_lines = lines[header_position + 1:] if header_position is not None else []
        metrics = self._aggregator.aggregate(data_lines, schema)
        metadata = extract_campaign_metadata(file_name)

        log_event(
            logger,
            logging.INFO,
            "csv_processed",
            file_name=file_name,
            campaign_name=metadata.campaign_name,
            event_columns=len(schema.event_columns),
            total_users=metrics.total_users,
            missing_id_count=metrics.missing_id_count,
            test_users_found=len(metrics.found_test_users),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return ProcessingResult(metadata=metadata, metrics=metrics, file_name=file_name)

    def process_bytes(self, data: bytes, file_name: str) -> ProcessingResult:
        """
        Decode uploaded bytes as UTF-8 (BOM tolerated) and process them.
        """
        if self._max_upload_bytes is not None and len(data) > self._max_upload_bytes:
            raise CSVUploadError(
                f"CSV file exceeds the maximum upload size of {self._max_upload_bytes} bytes."
            )
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CSVUploadError("CSV must be UTF-8 encoded.") from exc
        return self.process(text, file_name)

    async def process_upload(self, upload_file: UploadFile) -> ProcessingResult:
        """
        Read an uploaded file completely, then process it.

        Reading is the only suspend point; processing starts once every byte
        is in memory.
        """
        data = await upload_file.read()
        return self.process_bytes(data, upload_file.filename or DEFAULT_UPLOAD_NAME)


# ---------------------------------------------------------------------------
# Missing-identity export
# ---------------------------------------------------------------------------


def build_missing_ids_csv(missing_ids: list[str] | tuple[str, ...]) -> str:
    """
    Render collected missing-identity suffixes as a one-column CSV.
    """
    return MISSING_IDS_HEADER + "\n" + "\n".join(missing_ids)


def missing_ids_filename(campaign_name: str) -> str:
    return f"missing_ids_{'_'.join(campaign_name.split())}.csv"


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_csv_processing_service() -> CSVProcessingService:
    """
    Build and cache the processing service with env-driven settings.
    """
    engine_settings = get_analytics_engine_settings()
    processing_settings = get_csv_processing_settings()
    validator = CSVRowValidator(
        test_user_ids=engine_settings.test_user_ids,
        missing_id_prefix=engine_settings.missing_id_prefix,
    )
    return CSVProcessingService(
        mapper=SchemaMapper(interaction_columns=engine_settings.interaction_columns),
        aggregator=AggregationService(
            validator=validator,
            log_skipped_rows=processing_settings.log_skipped_rows,
        ),
        max_upload_bytes=processing_settings.max_upload_bytes,
    )
