"""
app/domain package marker.
"""

from app.domain.campaign_analytics import (
    CampaignMetadata,
    ColumnSchema,
    FunnelStep,
    FunnelStepInput,
    IdentityClassification,
    IdentityKind,
    MetricOption,
    MetricsRecord,
    NamedColumn,
    ProcessingResult,
)

__all__ = [
    "CampaignMetadata",
    "ColumnSchema",
    "FunnelStep",
    "FunnelStepInput",
    "IdentityClassification",
    "IdentityKind",
    "MetricOption",
    "MetricsRecord",
    "NamedColumn",
    "ProcessingResult",
]
