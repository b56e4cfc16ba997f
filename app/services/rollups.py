"""
app/services/rollups.py

Null-safe arithmetic shared by the comparison and monthly-summary views.

MonthlySummary rows carry only counters and per-month rates, so any rollup
across rows is ratio-of-sums:

    CTR  = clicks / impressions
    CPM  = spend / impressions * 1000
    CPC  = spend / clicks
    ROAS = revenue / spend

A zero denominator yields 0 for the rate.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from app.domain.reporting import PeriodTotals


class SummaryCounters(Protocol):
    total_spend: float | None
    total_impressions: int | None
    total_clicks: int | None
    total_video_views: int | None
    total_purchases: int | None
    total_revenue: float | None
    campaign_count: int | None


def safe_ratio(numerator: float, denominator: float, *, scale: float = 1.0) -> float:
    return numerator * scale / denominator if denominator > 0 else 0.0


def calculate_change(current: float, previous: float) -> float | None:
    """
    Percentage change from ``previous`` to ``current``.

    A zero baseline has no meaningful growth rate: +100 when something
    appeared, None when both sides are empty (or current went negative).
    """

    if previous == 0:
        return 100.0 if current > 0 else None
    return (current - previous) / previous * 100


def build_period_totals(rows: Iterable[SummaryCounters]) -> PeriodTotals:
    spend = 0.0
    impressions = 0
    clicks = 0
    video_views = 0
    purchases = 0
    revenue = 0.0
    campaigns = 0

    for row in rows:
        spend += float(row.total_spend or 0)
        impressions += int(row.total_impressions or 0)
        clicks += int(row.total_clicks or 0)
        video_views += int(row.total_video_views or 0)
        purchases += int(row.total_purchases or 0)
        revenue += float(row.total_revenue or 0)
        campaigns += int(row.campaign_count or 0)

    return PeriodTotals(
        total_spend=spend,
        total_impressions=impressions,
        total_clicks=clicks,
        total_video_views=video_views,
        total_purchases=purchases,
        total_revenue=revenue,
        campaign_count=campaigns,
        avg_ctr=safe_ratio(clicks, impressions),
        avg_cpm=safe_ratio(spend, impressions, scale=1000),
        avg_cpc=safe_ratio(spend, clicks),
        avg_roas=safe_ratio(revenue, spend),
    )
