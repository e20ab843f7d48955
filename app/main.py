from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    detail: str


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    from app.config import load_env_files

    load_env_files()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log the effective engine configuration on boot."""
    from app.config import get_analytics_engine_settings, get_funnel_settings

    engine_settings = get_analytics_engine_settings()
    funnel_settings = get_funnel_settings()
    logging.getLogger(__name__).info(
        "Analytics engine ready test_ids=%d interaction_columns=%d missing_prefix=%r "
        "funnel_items=%d..%d (default %d)",
        len(engine_settings.test_user_ids),
        len(engine_settings.interaction_columns),
        engine_settings.missing_id_prefix,
        funnel_settings.min_items,
        funnel_settings.max_items,
        funnel_settings.default_items,
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Campaign Analytics API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import csv_processing_router, funnel_router

    application.include_router(csv_processing_router)
    application.include_router(funnel_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", detail="Campaign analytics engine is ready.")

    return application


app = create_app()
