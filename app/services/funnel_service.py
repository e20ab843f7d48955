"""
app/services/funnel_service.py

Funnel metric catalogue and percentage resolution.

Percentage rules
----------------
Step 1 (index 0), by percentage base:

    no base                 100%
    "total_audience"        value / entered total audience, or 100% when none / <= 0
    any other catalogue key value / catalogue value, or 100% when unknown / <= 0

Step n > 1:

    value / previous step value, or 0% when the previous value is 0

Percentages are rounded half-up to one decimal. When a denominator applies
to step 1, its effective value is ``round(percentage / 100 * denominator)``
so that a manually edited percentage can be turned back into a count.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Sequence

from app.config import FunnelSettings, get_funnel_settings
from app.domain.campaign_analytics import FunnelStep, FunnelStepInput, MetricOption, MetricsRecord
from app.parsing.labels import format_number, to_title_case

logger = logging.getLogger(__name__)

TOTAL_AUDIENCE_BASE = "total_audience"

EVENT_LABEL_PREFIX = "event_count_"

FULL_PERCENTAGE = 100.0
ZERO_PERCENTAGE = 0.0

_ONE_DECIMAL = Decimal("0.1")


# ---------------------------------------------------------------------------
# Arithmetic helpers
# ---------------------------------------------------------------------------


def percentage_of(value: int, denominator: int) -> float:
    """
    ``value / denominator * 100`` rounded half-up to one decimal.

    The caller guarantees ``denominator > 0``.
    """
    ratio = Decimal(value * 100) / Decimal(denominator)
    return float(ratio.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def derive_effective_value(percentage: float, denominator: int) -> int:
    """
    Reconstruct a raw count from a percentage of *denominator*, rounding half-up.
    """
    product = Decimal(str(percentage)) / Decimal(100) * Decimal(denominator)
    return int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_percentage_text(text: str | None) -> float | None:
    """
    Read a percentage typed by a user (``"85.5%"``, ``" 12 "``); None when unreadable.
    """
    if text is None:
        return None
    cleaned = text.strip().rstrip("%").strip()
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def format_percentage(percentage: float) -> str:
    return f"{percentage:.1f}%"


def unique_completion_rate(metrics: MetricsRecord) -> str:
    """
    Share of unique impressions that finished the content, e.g. ``"42.5"``; ``"0"`` without impressions.
    """
    if metrics.unique_impressions <= 0:
        return "0"
    return f"{percentage_of(metrics.unique_content_finishes, metrics.unique_impressions):.1f}"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class FunnelService:
    """
    Stateless funnel builder.

    Every method returns fresh lists; callers keep the current funnel and
    pass it back in on each edit.
    """

    def __init__(self, *, settings: FunnelSettings | None = None) -> None:
        self._settings = settings or FunnelSettings()

    @property
    def settings(self) -> FunnelSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    def build_metric_catalogue(self, metrics: MetricsRecord) -> list[MetricOption]:
        """
        List every positive metric available for a funnel, highest value first.
        """
        candidates: list[tuple[str, str, int | None]] = [
            (TOTAL_AUDIENCE_BASE, "Total Audience", metrics.total_users),
            ("total_impressions", "Total Impressions", metrics.total_impressions),
            ("unique_impressions", "Unique Impressions", metrics.unique_impressions),
            ("total_content_finished", "Total Content Finished", metrics.total_content_finished),
            ("unique_completion", "Unique Completion", metrics.unique_content_finishes),
            ("unique_interactivity", "Unique Interactivity", metrics.unique_interactions),
            ("total_thumbnail", "Total Thumbnail", metrics.total_thumbnail_count),
            ("unique_thumbnail", "Unique Thumbnail", metrics.unique_thumbnail_count),
            ("total_visit", "Total Visit", metrics.total_visit_count),
            ("unique_visit", "Unique Visit", metrics.unique_visit_count),
            ("total_play", "Total Play", metrics.total_play_count),
            ("unique_play", "Unique Play", metrics.unique_play_count),
        ]
        for header, total in metrics.event_sums.items():
            candidates.append((header, self._event_label(header), total))
        for header, unique in metrics.event_unique_user_counts.items():
            candidates.append((f"unique_{header}", f"Unique {self._event_label(header)}", unique))

        options = [
            MetricOption(key=key, label=label, value=value)
            for key, label, value in candidates
            if value is not None and value > 0 and not self._is_excluded(label)
        ]
        return sorted(options, key=lambda option: option.value, reverse=True)

    # ------------------------------------------------------------------
    # Funnel construction and edits
    # ------------------------------------------------------------------

    def build_default_funnel(
        self,
        catalogue: Sequence[MetricOption],
        *,
        item_count: int | None = None,
    ) -> list[FunnelStepInput]:
        """
        Pre-fill a funnel: step *i* takes catalogue entry ``min(i, len - 1)``.

        The item count is clamped to the configured bounds. An empty catalogue
        yields an empty funnel.
        """
        if not catalogue:
            return []
        count = self._settings.clamp_item_count(item_count)
        last = len(catalogue) - 1
        return [
            FunnelStepInput(
                metric=catalogue[min(index, last)].key,
                value=catalogue[min(index, last)].value,
                label=catalogue[min(index, last)].label,
            )
            for index in range(count)
        ]

    def reassign_step(
        self,
        steps: Sequence[FunnelStepInput],
        index: int,
        metric_key: str,
        catalogue: Sequence[MetricOption],
    ) -> list[FunnelStepInput]:
        """
        Point one step at another catalogue metric; unknown keys leave the funnel unchanged.
        """
        updated = list(steps)
        option = _find_option(catalogue, metric_key)
        if option is None or not 0 <= index < len(updated):
            return updated
        updated[index] = FunnelStepInput(metric=option.key, value=option.value, label=option.label)
        return updated

    @staticmethod
    def swap_steps(steps: Sequence[FunnelStepInput], first: int, second: int) -> list[FunnelStepInput]:
        """
        Exchange two steps, as a drag-and-drop reorder does.
        """
        updated = list(steps)
        if 0 <= first < len(updated) and 0 <= second < len(updated):
            updated[first], updated[second] = updated[second], updated[first]
        return updated

    # ------------------------------------------------------------------
    # Percentage resolution
    # ------------------------------------------------------------------

    def resolve_funnel(
        self,
        steps: Sequence[FunnelStepInput],
        *,
        percentage_base: str | None = None,
        total_audience: int | None = None,
        catalogue: Sequence[MetricOption] = (),
    ) -> list[FunnelStep]:
        """
        Compute display percentages for every step.

        Parameters
        ----------
        steps:
            Ordered funnel steps carrying their metric values.
        percentage_base:
            Denominator selection for the first step: ``"total_audience"``,
            another catalogue key, or None/empty for a fixed 100%.
        total_audience:
            Externally entered audience size, used only with the
            ``"total_audience"`` base.
        catalogue:
            Full metric catalogue the base key is looked up in.
        """
        resolved: list[FunnelStep] = []
        previous_value = 0

        for index, step in enumerate(steps):
            label = step.label or self._label_for(step.metric, catalogue)
            if index == 0:
                denominator = self._first_step_denominator(percentage_base, total_audience, catalogue)
                if denominator is None:
                    percentage = FULL_PERCENTAGE
                    display = "100%"
                    effective_value = step.value
                    calculation = f"{format_number(step.value)}/{format_number(step.value)}"
                else:
                    percentage = percentage_of(step.value, denominator)
                    display = format_percentage(percentage)
                    effective_value = derive_effective_value(percentage, denominator)
                    calculation = f"{format_number(step.value)}/{format_number(denominator)}"
            else:
                denominator = previous_value if previous_value > 0 else None
                if denominator is None:
                    percentage = ZERO_PERCENTAGE
                    display = "0%"
                else:
                    percentage = percentage_of(step.value, denominator)
                    display = format_percentage(percentage)
                effective_value = step.value
                calculation = f"{format_number(step.value)}/{format_number(previous_value)}"

            resolved.append(
                FunnelStep(
                    step=index + 1,
                    metric=step.metric,
                    label=label,
                    value=step.value,
                    percentage=percentage,
                    display_percentage=display,
                    effective_value=effective_value,
                    calculation=calculation,
                    base_value=denominator,
                )
            )
            previous_value = step.value

        logger.debug(
            "resolve_funnel steps=%d base=%r total_audience=%r",
            len(resolved),
            percentage_base,
            total_audience,
        )
        return resolved

    def override_first_percentage(
        self,
        steps: Sequence[FunnelStep],
        percentage: float,
    ) -> list[FunnelStep]:
        """
        Apply a manually edited first-step percentage.

        The first step's effective value is recomputed against its base.
        Without a base the step is fixed at 100% and is returned unchanged.
        """
        updated = list(steps)
        if not updated or updated[0].base_value is None:
            return updated
        first = updated[0]
        updated[0] = replace(
            first,
            percentage=percentage,
            display_percentage=format_percentage(percentage),
            effective_value=derive_effective_value(percentage, first.base_value),
        )
        return updated

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _first_step_denominator(
        percentage_base: str | None,
        total_audience: int | None,
        catalogue: Sequence[MetricOption],
    ) -> int | None:
        if not percentage_base:
            return None
        if percentage_base == TOTAL_AUDIENCE_BASE:
            if total_audience is not None and total_audience > 0:
                return total_audience
            return None
        option = _find_option(catalogue, percentage_base)
        if option is not None and option.value > 0:
            return option.value
        return None

    @staticmethod
    def _event_label(header: str) -> str:
        name = header[len(EVENT_LABEL_PREFIX):] if header.lower().startswith(EVENT_LABEL_PREFIX) else header
        return to_title_case(name)

    def _is_excluded(self, label: str) -> bool:
        lowered = label.lower()
        return any(term in lowered for term in self._settings.excluded_label_terms)

    @staticmethod
    def _label_for(metric_key: str, catalogue: Sequence[MetricOption]) -> str:
        option = _find_option(catalogue, metric_key)
        return option.label if option is not None else metric_key


def _find_option(catalogue: Sequence[MetricOption], key: str) -> MetricOption | None:
    return next((option for option in catalogue if option.key == key), None)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_funnel_service() -> FunnelService:
    """
    Build and cache the funnel service with env-driven bounds.
    """
    return FunnelService(settings=get_funnel_settings())
