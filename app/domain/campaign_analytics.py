"""
app/domain/campaign_analytics.py

Domain models used by the campaign analytics flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


class IdentityKind:
    TEST = "test"
    MISSING = "missing"
    REAL = "real"


@dataclass(frozen=True)
class NamedColumn:
    """
    One header name paired with its column position.
    """

    name: str
    index: int


@dataclass(frozen=True)
class ColumnSchema:
    """
    Resolved column layout of one CSV export.

    The identity, impression and finished indices are always present; every
    other column family is optional and resolved independently.
    """

    identity_index: int
    impression_index: int
    finished_index: int
    event_columns: tuple[NamedColumn, ...] = ()
    interaction_columns: tuple[NamedColumn, ...] = ()
    thumbnail_index: int | None = None
    visit_index: int | None = None
    play_index: int | None = None
    headers: tuple[str, ...] = ()


@dataclass(frozen=True)
class IdentityClassification:
    """
    Classification of one non-empty row identity.

    ``missing_suffix`` is set whenever the identity carries the missing-identity
    prefix, independently of ``kind``.
    """

    kind: str
    identity: str
    missing_suffix: str | None = None

    @property
    def is_test(self) -> bool:
        return self.kind == IdentityKind.TEST

    @property
    def is_missing(self) -> bool:
        return self.missing_suffix is not None


@dataclass(frozen=True)
class MetricsRecord:
    """
    Aggregated output of one CSV export.

    Each optional total/unique pair is ``None`` together when its backing
    column was absent from the header row. The per-event maps are
    read-only views.
    """

    total_users: int
    total_impressions: int
    unique_impressions: int
    total_content_finished: int
    unique_content_finishes: int
    unique_interactions: int | None = None
    total_thumbnail_count: int | None = None
    unique_thumbnail_count: int | None = None
    total_visit_count: int | None = None
    unique_visit_count: int | None = None
    total_play_count: int | None = None
    unique_play_count: int | None = None
    event_sums: Mapping[str, int] = field(default_factory=dict)
    event_unique_user_counts: Mapping[str, int] = field(default_factory=dict)
    missing_ids: tuple[str, ...] = ()
    missing_id_count: int = 0
    found_test_users: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_sums", MappingProxyType(dict(self.event_sums)))
        object.__setattr__(
            self, "event_unique_user_counts", MappingProxyType(dict(self.event_unique_user_counts))
        )


@dataclass(frozen=True)
class CampaignMetadata:
    """
    Campaign name and reporting dates parsed from the uploaded file name.
    """

    campaign_name: str
    display_date: str
    date: str | None = None
    start_date: str | None = None
    end_date: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """
    Immutable outcome of processing one uploaded file.
    """

    metadata: CampaignMetadata
    metrics: MetricsRecord
    file_name: str


@dataclass(frozen=True)
class MetricOption:
    """
    One selectable metric of the funnel catalogue.
    """

    key: str
    label: str
    value: int


@dataclass(frozen=True)
class FunnelStepInput:
    """
    A user-chosen funnel step before percentages are resolved.
    """

    metric: str
    value: int
    label: str | None = None


@dataclass(frozen=True)
class FunnelStep:
    """
    One display-ready funnel row.
    """

    step: int
    metric: str
    label: str
    value: int
    percentage: float
    display_percentage: str
    effective_value: int
    calculation: str
    base_value: int | None = None
