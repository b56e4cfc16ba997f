"""
app/schemas/ad_import.py

Response schemas for ad-performance import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.ad_metrics import AdImportResult


class ImportPeriodResponse(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    month_name: str
    source: str


class ImportRecordsResponse(BaseModel):
    created: int = Field(..., ge=0)
    updated: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class ImportSummariesResponse(BaseModel):
    platforms: list[str] = Field(default_factory=list)
    count: int = Field(..., ge=0)


class SkippedRowResponse(BaseModel):
    """
    One data line dropped by policy (unknown platform, missing impressions).
    """

    model_config = ConfigDict(from_attributes=True)

    line_number: int = Field(..., ge=1)
    reason: str
    platform_label: str | None = None


class ImportSkippedResponse(BaseModel):
    count: int = Field(..., ge=0)
    by_reason: dict[str, int] = Field(default_factory=dict)
    rows: list[SkippedRowResponse] = Field(default_factory=list)


class AdImportResponse(BaseModel):
    """
    API response model for one completed import.
    """

    period: ImportPeriodResponse
    records: ImportRecordsResponse
    summaries: ImportSummariesResponse
    skipped: ImportSkippedResponse

    @classmethod
    def from_result(cls, result: AdImportResult) -> "AdImportResponse":
        return cls(
            period=ImportPeriodResponse(
                year=result.period.year,
                month=result.period.month,
                month_name=result.period.month_name,
                source=result.period_source,
            ),
            records=ImportRecordsResponse(
                created=result.created,
                updated=result.updated,
                total=result.total,
            ),
            summaries=ImportSummariesResponse(
                platforms=list(result.summary_platforms),
                count=len(result.summary_platforms),
            ),
            skipped=ImportSkippedResponse(
                count=result.skipped_count,
                by_reason=dict(result.skipped_by_reason),
                rows=[SkippedRowResponse.model_validate(row) for row in result.skipped_rows],
            ),
        )


class ReportPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str
    month_name: str
    platform_count: int = Field(..., ge=0)
    campaign_count: int = Field(..., ge=0)
    total_spend: float
    total_impressions: int


class ReportPeriodsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    periods: list[ReportPeriodResponse] = Field(default_factory=list)
    years: list[int] = Field(default_factory=list)
    total_spend: float = 0.0
    total_impressions: int = 0
