"""
app/services package marker.
"""

from app.services.ad_import_service import (
    AdImportError,
    AdImportPersistenceError,
    AdImportService,
    NoValidRowsError,
    get_ad_import_service,
)
from app.services.comparison_service import ComparisonService, get_comparison_service
from app.services.monthly_summary_service import (
    MonthlySummaryService,
    get_monthly_summary_service,
)

__all__ = [
    "AdImportError",
    "AdImportPersistenceError",
    "AdImportService",
    "ComparisonService",
    "MonthlySummaryService",
    "NoValidRowsError",
    "get_ad_import_service",
    "get_comparison_service",
    "get_monthly_summary_service",
]
