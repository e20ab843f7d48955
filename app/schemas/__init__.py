"""
app/schemas package marker.
"""

from app.schemas.csv_processing import (
    CampaignMetadataResponse,
    CSVProcessingResponse,
    MissingIdsExportRequest,
)
from app.schemas.funnel import (
    FunnelDefaultRequest,
    FunnelResolveRequest,
    FunnelResponse,
    FunnelStepRequest,
    FunnelStepResponse,
)
from app.schemas.metrics import MetricOptionResponse, MetricsRecordPayload

__all__ = [
    "CampaignMetadataResponse",
    "CSVProcessingResponse",
    "FunnelDefaultRequest",
    "FunnelResolveRequest",
    "FunnelResponse",
    "FunnelStepRequest",
    "FunnelStepResponse",
    "MetricOptionResponse",
    "MetricsRecordPayload",
    "MissingIdsExportRequest",
]
