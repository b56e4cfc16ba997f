"""
app/schemas/monthly_summary.py

Response schemas for the monthly summary dashboard endpoint.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.comparison import PeriodTotalsResponse


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MonthlySummaryItemResponse(_FromAttributes):
    id: str
    platform: str
    month: date
    month_name: str
    total_spend: float
    total_impressions: int
    total_clicks: int
    avg_ctr: float
    avg_cpm: float
    avg_cpc: float
    total_video_views: int
    total_purchases: int
    total_revenue: float
    avg_roas: float
    campaign_count: int


class PlatformMonthResponse(_FromAttributes):
    month: date
    month_name: str
    spend: float
    impressions: int
    clicks: int
    purchases: int
    revenue: float


class PlatformBreakdownResponse(_FromAttributes):
    platform: str
    totals: PeriodTotalsResponse
    spend_share: float
    months: list[PlatformMonthResponse] = Field(default_factory=list)


class MonthlyTrendResponse(_FromAttributes):
    month: date
    month_name: str
    total_spend: float
    total_impressions: int
    total_clicks: int
    total_purchases: int
    total_revenue: float
    platforms: list[str] = Field(default_factory=list)


class MonthlySummaryResponse(_FromAttributes):
    summaries: list[MonthlySummaryItemResponse] = Field(default_factory=list)
    totals: PeriodTotalsResponse
    platform_breakdown: list[PlatformBreakdownResponse] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrendResponse] = Field(default_factory=list)
