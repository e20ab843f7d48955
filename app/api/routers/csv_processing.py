"""
app/api/routers/csv_processing.py

CSV processing HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, status

from app.api.dependencies import get_csv_upload
from app.schemas.csv_processing import (
    CampaignMetadataResponse,
    CSVProcessingResponse,
    MissingIdsExportRequest,
)
from app.schemas.funnel import FunnelStepResponse
from app.schemas.metrics import MetricOptionResponse, MetricsRecordPayload
from app.services.csv_processing_service import (
    CSVProcessingService,
    CSVUploadError,
    build_missing_ids_csv,
    get_csv_processing_service,
    missing_ids_filename,
)
from app.services.funnel_service import FunnelService, get_funnel_service, unique_completion_rate
from app.validators.mapping_validator import SchemaError

router = APIRouter(tags=["processing"])


@router.post("/process-csv", response_model=CSVProcessingResponse)
async def process_csv(
    file: UploadFile = Depends(get_csv_upload),
    processing_service: CSVProcessingService = Depends(get_csv_processing_service),
    funnel_service: FunnelService = Depends(get_funnel_service),
) -> CSVProcessingResponse:
    """
    Aggregate one analytics export and parse its campaign metadata.
    """

    try:
        result = await processing_service.process_upload(file)
    except SchemaError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except CSVUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        await file.close()

    catalogue = funnel_service.build_metric_catalogue(result.metrics)
    default_steps = funnel_service.resolve_funnel(
        funnel_service.build_default_funnel(catalogue),
        catalogue=catalogue,
    )

    return CSVProcessingResponse(
        file_name=result.file_name,
        metadata=CampaignMetadataResponse.from_domain(result.metadata),
        metrics=MetricsRecordPayload.from_domain(result.metrics),
        unique_completion_rate=unique_completion_rate(result.metrics),
        funnel_options=[MetricOptionResponse.from_domain(option) for option in catalogue],
        funnel_defaults=[FunnelStepResponse.from_domain(step) for step in default_steps],
    )


@router.post("/missing-ids/export")
def export_missing_ids(body: MissingIdsExportRequest) -> Response:
    """
    Download the collected missing-identity suffixes as CSV.
    """

    if not body.missing_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No missing IDs to download.",
        )

    return Response(
        content=build_missing_ids_csv(body.missing_ids),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{missing_ids_filename(body.campaign_name)}"',
        },
    )
