"""
app/repositories package marker.
"""

from app.repositories.ad_metrics_repository import AdMetricsRepository
from app.repositories.monthly_summary_repository import (
    MonthlySummaryFilters,
    MonthlySummaryRepository,
)

__all__ = [
    "AdMetricsRepository",
    "MonthlySummaryFilters",
    "MonthlySummaryRepository",
]
