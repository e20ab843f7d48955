"""
app/schemas/funnel.py

Request and response schemas for funnel endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.campaign_analytics import FunnelStep, FunnelStepInput
from app.schemas.metrics import MetricOptionResponse, MetricsRecordPayload


class FunnelStepRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    metric: str = Field(..., min_length=1)
    value: int
    label: str | None = None

    def to_domain(self) -> FunnelStepInput:
        return FunnelStepInput(metric=self.metric, value=self.value, label=self.label)


class FunnelResolveRequest(BaseModel):
    """
    A curated funnel plus the metrics it was built from.

    ``first_step_percentage`` carries a manually edited percentage for the
    first step; its effective value is then recomputed against the base.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    steps: list[FunnelStepRequest] = Field(..., min_length=1)
    metrics: MetricsRecordPayload
    percentage_base: str | None = None
    total_audience: int | None = None
    first_step_percentage: str | None = None


class FunnelDefaultRequest(BaseModel):
    metrics: MetricsRecordPayload
    item_count: int | None = Field(default=None, ge=1)


class FunnelStepResponse(BaseModel):
    """
    API response model for one display-ready funnel step.
    """

    step: int = Field(..., ge=1)
    metric: str
    label: str
    value: int
    percentage: float
    display_percentage: str
    effective_value: int
    calculation: str
    base_value: int | None = None

    @classmethod
    def from_domain(cls, step: FunnelStep) -> "FunnelStepResponse":
        return cls(
            step=step.step,
            metric=step.metric,
            label=step.label,
            value=step.value,
            percentage=step.percentage,
            display_percentage=step.display_percentage,
            effective_value=step.effective_value,
            calculation=step.calculation,
            base_value=step.base_value,
        )


class FunnelResponse(BaseModel):
    steps: list[FunnelStepResponse] = Field(default_factory=list)
    options: list[MetricOptionResponse] = Field(default_factory=list)
    min_items: int
    max_items: int
