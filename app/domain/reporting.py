"""
app/domain/reporting.py

Read-side shapes produced from MonthlySummary rows for reporting views:
report periods, period-over-period comparison and the monthly dashboard
rollup. Rates here are ratio-of-sums and default to 0 (never None) when
their denominator is 0; percentage changes may be None.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class ReportPeriod:
    year: int
    month: int
    label: str
    month_name: str
    platform_count: int
    campaign_count: int
    total_spend: float
    total_impressions: int


@dataclass(frozen=True)
class ReportPeriodsData:
    periods: list[ReportPeriod]
    years: list[int]
    total_spend: float
    total_impressions: int


@dataclass(frozen=True)
class PeriodTotals:
    """
    Summed counters plus ratio-of-sums rates over a set of summaries.
    """

    total_spend: float = 0.0
    total_impressions: int = 0
    total_clicks: int = 0
    total_video_views: int = 0
    total_purchases: int = 0
    total_revenue: float = 0.0
    campaign_count: int = 0
    avg_ctr: float = 0.0
    avg_cpm: float = 0.0
    avg_cpc: float = 0.0
    avg_roas: float = 0.0


@dataclass(frozen=True)
class PeriodSnapshot:
    date: date
    label: str
    totals: PeriodTotals
    platform_count: int


@dataclass(frozen=True)
class PlatformPeriodData:
    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    cpm: float = 0.0
    purchases: int = 0
    revenue: float = 0.0
    roas: float = 0.0


@dataclass(frozen=True)
class PlatformComparison:
    platform: str
    period1: PlatformPeriodData
    period2: PlatformPeriodData
    changes: dict[str, float | None]


@dataclass(frozen=True)
class ComparisonResult:
    period1: PeriodSnapshot
    period2: PeriodSnapshot
    changes: dict[str, float | None]
    platform_comparison: list[PlatformComparison]


@dataclass(frozen=True)
class MonthlySummaryItem:
    """
    One stored summary with nulls coerced to 0 for presentation.
    """

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


@dataclass(frozen=True)
class PlatformMonth:
    month: date
    month_name: str
    spend: float
    impressions: int
    clicks: int
    purchases: int
    revenue: float


@dataclass(frozen=True)
class PlatformBreakdown:
    platform: str
    totals: PeriodTotals
    spend_share: float
    months: list[PlatformMonth] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlyTrend:
    month: date
    month_name: str
    total_spend: float
    total_impressions: int
    total_clicks: int
    total_purchases: int
    total_revenue: float
    platforms: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlySummaryReport:
    summaries: list[MonthlySummaryItem]
    totals: PeriodTotals
    platform_breakdown: list[PlatformBreakdown]
    monthly_trend: list[MonthlyTrend]
