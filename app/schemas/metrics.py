"""
app/schemas/metrics.py

Metrics payloads shared by the processing and funnel endpoints.
"""

from __future__ import annotations

from dataclasses import fields

from pydantic import BaseModel, Field

from app.domain.campaign_analytics import MetricOption, MetricsRecord


class MetricsRecordPayload(BaseModel):
    """
    Aggregated metrics of one export.

    Returned by ``/process-csv`` and sent back unchanged by clients on funnel
    requests, since the service keeps no state between calls.
    """

    total_users: int = Field(..., ge=0)
    total_impressions: int
    unique_impressions: int = Field(..., ge=0)
    total_content_finished: int
    unique_content_finishes: int = Field(..., ge=0)
    unique_interactions: int | None = None
    total_thumbnail_count: int | None = None
    unique_thumbnail_count: int | None = None
    total_visit_count: int | None = None
    unique_visit_count: int | None = None
    total_play_count: int | None = None
    unique_play_count: int | None = None
    event_sums: dict[str, int] = Field(default_factory=dict)
    event_unique_user_counts: dict[str, int] = Field(default_factory=dict)
    missing_ids: list[str] = Field(default_factory=list)
    missing_id_count: int = Field(default=0, ge=0)
    found_test_users: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, metrics: MetricsRecord) -> "MetricsRecordPayload":
        payload = {item.name: getattr(metrics, item.name) for item in fields(metrics)}
        payload["event_sums"] = dict(metrics.event_sums)
        payload["event_unique_user_counts"] = dict(metrics.event_unique_user_counts)
        payload["missing_ids"] = list(metrics.missing_ids)
        payload["found_test_users"] = list(metrics.found_test_users)
        return cls(**payload)

    def to_domain(self) -> MetricsRecord:
        data = self.model_dump()
        data["missing_ids"] = tuple(self.missing_ids)
        data["found_test_users"] = tuple(self.found_test_users)
        return MetricsRecord(**data)


class MetricOptionResponse(BaseModel):
    """
    API response model for one funnel catalogue entry.
    """

    key: str
    label: str
    value: int

    @classmethod
    def from_domain(cls, option: MetricOption) -> "MetricOptionResponse":
        return cls(key=option.key, label=option.label, value=option.value)
