"""
app/services package marker.
"""

from app.services.aggregation_service import AggregationService
from app.services.csv_processing_service import (
    CSVProcessingService,
    CSVUploadError,
    build_missing_ids_csv,
    get_csv_processing_service,
    missing_ids_filename,
)
from app.services.funnel_service import TOTAL_AUDIENCE_BASE, FunnelService, get_funnel_service

__all__ = [
    "AggregationService",
    "CSVProcessingService",
    "CSVUploadError",
    "FunnelService",
    "TOTAL_AUDIENCE_BASE",
    "build_missing_ids_csv",
    "get_csv_processing_service",
    "get_funnel_service",
    "missing_ids_filename",
]
