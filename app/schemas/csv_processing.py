"""
app/schemas/csv_processing.py

Request and response schemas for CSV processing endpoints.
"""

from __future__ import annotations

from dataclasses import asdict

from pydantic import BaseModel, Field

from app.domain.campaign_analytics import CampaignMetadata
from app.schemas.funnel import FunnelStepResponse
from app.schemas.metrics import MetricOptionResponse, MetricsRecordPayload


class CampaignMetadataResponse(BaseModel):
    """
    API response model for metadata parsed from the file name.
    """

    campaign_name: str
    display_date: str
    date: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    @classmethod
    def from_domain(cls, metadata: CampaignMetadata) -> "CampaignMetadataResponse":
        return cls(**asdict(metadata))


class CSVProcessingResponse(BaseModel):
    """
    API response model for one processed CSV export.
    """

    file_name: str
    metadata: CampaignMetadataResponse
    metrics: MetricsRecordPayload
    unique_completion_rate: str
    funnel_options: list[MetricOptionResponse] = Field(default_factory=list)
    funnel_defaults: list[FunnelStepResponse] = Field(default_factory=list)


class MissingIdsExportRequest(BaseModel):
    """
    Missing-identity suffixes to render as a downloadable CSV.
    """

    campaign_name: str = Field(..., min_length=1)
    missing_ids: list[str] = Field(default_factory=list)
