"""
app/api/routers package marker.
"""

from app.api.routers.ad_import import router as ad_import_router
from app.api.routers.comparison import router as comparison_router
from app.api.routers.monthly_summary import router as monthly_summary_router

__all__ = [
    "ad_import_router",
    "comparison_router",
    "monthly_summary_router",
]
