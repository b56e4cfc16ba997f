"""
app/services/monthly_summary_service.py

Dashboard rollup over stored MonthlySummary rows: the rows themselves,
grand totals, a per-platform breakdown with spend share, and a per-month
trend. Read-only; the import pipeline is the only writer.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from functools import lru_cache

from sqlalchemy.orm import Session

from app.domain.ad_metrics import ImportPeriod
from app.domain.reporting import (
    MonthlySummaryItem,
    MonthlySummaryReport,
    MonthlyTrend,
    PlatformBreakdown,
    PlatformMonth,
)
from app.repositories.monthly_summary_repository import (
    MonthlySummaryFilters,
    MonthlySummaryRepository,
)
from app.services.rollups import build_period_totals, safe_ratio
from db.models.monthly_summary import MonthlySummary

logger = logging.getLogger(__name__)


def to_summary_item(summary: MonthlySummary) -> MonthlySummaryItem:
    return MonthlySummaryItem(
        id=str(summary.id),
        platform=summary.platform,
        month=summary.month,
        month_name=ImportPeriod.from_date(summary.month).label,
        total_spend=float(summary.total_spend or 0),
        total_impressions=int(summary.total_impressions or 0),
        total_clicks=int(summary.total_clicks or 0),
        avg_ctr=float(summary.avg_ctr or 0),
        avg_cpm=float(summary.avg_cpm or 0),
        avg_cpc=float(summary.avg_cpc or 0),
        total_video_views=int(summary.total_video_views or 0),
        total_purchases=int(summary.total_purchases or 0),
        total_revenue=float(summary.total_revenue or 0),
        avg_roas=float(summary.avg_roas or 0),
        campaign_count=int(summary.campaign_count or 0),
    )


def group_by_platform(
    items: list[MonthlySummaryItem],
    total_spend: float,
) -> list[PlatformBreakdown]:
    grouped: dict[str, list[MonthlySummaryItem]] = defaultdict(list)
    for item in items:
        grouped[item.platform].append(item)

    breakdown = []
    for platform, platform_items in grouped.items():
        totals = build_period_totals(platform_items)
        breakdown.append(
            PlatformBreakdown(
                platform=platform,
                totals=totals,
                spend_share=safe_ratio(totals.total_spend, total_spend, scale=100),
                months=[
                    PlatformMonth(
                        month=item.month,
                        month_name=item.month_name,
                        spend=item.total_spend,
                        impressions=item.total_impressions,
                        clicks=item.total_clicks,
                        purchases=item.total_purchases,
                        revenue=item.total_revenue,
                    )
                    for item in platform_items
                ],
            )
        )

    breakdown.sort(key=lambda entry: entry.totals.total_spend, reverse=True)
    return breakdown


def group_by_month(items: list[MonthlySummaryItem]) -> list[MonthlyTrend]:
    grouped: dict[date, list[MonthlySummaryItem]] = defaultdict(list)
    for item in items:
        grouped[item.month].append(item)

    return [
        MonthlyTrend(
            month=month,
            month_name=month_items[0].month_name,
            total_spend=sum(item.total_spend for item in month_items),
            total_impressions=sum(item.total_impressions for item in month_items),
            total_clicks=sum(item.total_clicks for item in month_items),
            total_purchases=sum(item.total_purchases for item in month_items),
            total_revenue=sum(item.total_revenue for item in month_items),
            platforms=[item.platform for item in month_items],
        )
        for month, month_items in sorted(grouped.items())
    ]


class MonthlySummaryService:
    def get_monthly_summary(
        self,
        *,
        db: Session,
        filters: MonthlySummaryFilters,
    ) -> MonthlySummaryReport:
        rows = MonthlySummaryRepository(db).find_many(filters)
        items = [to_summary_item(row) for row in rows]
        totals = build_period_totals(items)
        logger.debug("Monthly summary query filters=%s rows=%d", filters, len(items))

        return MonthlySummaryReport(
            summaries=items,
            totals=totals,
            platform_breakdown=group_by_platform(items, totals.total_spend),
            monthly_trend=group_by_month(items),
        )


@lru_cache(maxsize=1)
def get_monthly_summary_service() -> MonthlySummaryService:
    return MonthlySummaryService()
