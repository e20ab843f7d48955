"""
app/api/routers package marker.
"""

from app.api.routers.csv_processing import router as csv_processing_router
from app.api.routers.funnel_router import router as funnel_router

__all__ = [
    "csv_processing_router",
    "funnel_router",
]
