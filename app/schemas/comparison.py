"""
app/schemas/comparison.py

Response schemas for the period comparison endpoint.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PeriodTotalsResponse(_FromAttributes):
    total_spend: float
    total_impressions: int
    total_clicks: int
    total_video_views: int
    total_purchases: int
    total_revenue: float
    campaign_count: int
    avg_ctr: float
    avg_cpm: float
    avg_cpc: float
    avg_roas: float


class PeriodSnapshotResponse(_FromAttributes):
    date: datetime.date
    label: str
    totals: PeriodTotalsResponse
    platform_count: int = Field(..., ge=0)


class PlatformPeriodDataResponse(_FromAttributes):
    spend: float
    impressions: int
    clicks: int
    ctr: float
    cpm: float
    purchases: int
    revenue: float
    roas: float


class PlatformComparisonResponse(_FromAttributes):
    platform: str
    period1: PlatformPeriodDataResponse
    period2: PlatformPeriodDataResponse
    changes: dict[str, float | None]


class ComparisonResponse(_FromAttributes):
    """
    Two period snapshots, their percentage changes, and per-platform rows
    sorted by period-2 spend descending.
    """

    period1: PeriodSnapshotResponse
    period2: PeriodSnapshotResponse
    changes: dict[str, float | None]
    platform_comparison: list[PlatformComparisonResponse] = Field(default_factory=list)
