"""
app/schemas package marker.
"""

from app.schemas.ad_import import (
    AdImportResponse,
    ImportPeriodResponse,
    ImportRecordsResponse,
    ImportSkippedResponse,
    ImportSummariesResponse,
    ReportPeriodResponse,
    ReportPeriodsResponse,
    SkippedRowResponse,
)
from app.schemas.comparison import ComparisonResponse
from app.schemas.monthly_summary import MonthlySummaryResponse

__all__ = [
    "AdImportResponse",
    "ComparisonResponse",
    "ImportPeriodResponse",
    "ImportRecordsResponse",
    "ImportSkippedResponse",
    "ImportSummariesResponse",
    "MonthlySummaryResponse",
    "ReportPeriodResponse",
    "ReportPeriodsResponse",
    "SkippedRowResponse",
]
