"""
app/api/routers/funnel_router.py

Funnel construction and percentage endpoints.

The service is stateless: every request carries the metrics record returned
by ``/process-csv`` together with the current funnel selection.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas.metrics import MetricOptionResponse
from app.schemas.funnel import (
    FunnelDefaultRequest,
    FunnelResolveRequest,
    FunnelResponse,
    FunnelStepResponse,
)
from app.services.funnel_service import FunnelService, get_funnel_service, parse_percentage_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/funnel", tags=["funnel"])


@router.post("/resolve", response_model=FunnelResponse)
def resolve_funnel(
    body: FunnelResolveRequest,
    funnel_service: FunnelService = Depends(get_funnel_service),
) -> FunnelResponse:
    """
    Compute display percentages for a curated funnel.

    Raises HTTP 400 when the number of steps is outside the configured bounds.
    """
    settings = funnel_service.settings
    if not settings.allows_item_count(len(body.steps)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Funnel must have between {settings.min_items} and "
                f"{settings.max_items} steps; got {len(body.steps)}."
            ),
        )

    catalogue = funnel_service.build_metric_catalogue(body.metrics.to_domain())
    steps = funnel_service.resolve_funnel(
        [step.to_domain() for step in body.steps],
        percentage_base=body.percentage_base or None,
        total_audience=body.total_audience,
        catalogue=catalogue,
    )

    edited = parse_percentage_text(body.first_step_percentage)
    if edited is not None:
        steps = funnel_service.override_first_percentage(steps, edited)
    elif body.first_step_percentage:
        logger.info("Ignoring unreadable first-step percentage %r", body.first_step_percentage)

    return FunnelResponse(
        steps=[FunnelStepResponse.from_domain(step) for step in steps],
        options=[MetricOptionResponse.from_domain(option) for option in catalogue],
        min_items=settings.min_items,
        max_items=settings.max_items,
    )


@router.post("/default", response_model=FunnelResponse)
def default_funnel(
    body: FunnelDefaultRequest,
    funnel_service: FunnelService = Depends(get_funnel_service),
) -> FunnelResponse:
    """
    Pre-fill a funnel from the highest-valued catalogue metrics.
    """
    settings = funnel_service.settings
    catalogue = funnel_service.build_metric_catalogue(body.metrics.to_domain())
    inputs = funnel_service.build_default_funnel(catalogue, item_count=body.item_count)
    steps = funnel_service.resolve_funnel(inputs, catalogue=catalogue)

    return FunnelResponse(
        steps=[FunnelStepResponse.from_domain(step) for step in steps],
        options=[MetricOptionResponse.from_domain(option) for option in catalogue],
        min_items=settings.min_items,
        max_items=settings.max_items,
    )
