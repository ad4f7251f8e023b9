"""
API Router — Mounts the EDA endpoint group.

  /api/v1/eda/{load,overview,sample,missing-values,numeric-stats,
               categorical-stats,histograms,survival,correlations,report,
               export/csv,export/json,health}
"""

from fastapi import APIRouter

from app.api.v1.eda_endpoints import router as eda_router

api_router = APIRouter()

api_router.include_router(
    eda_router,
    tags=["Passenger EDA"],
)
