"""
app/services/comparison_service.py

Period-over-period comparison over stored MonthlySummary rows.

Each period is rolled up with ratio-of-sums (see ``app.services.rollups``),
then every metric gets ``(curr - prev) / prev * 100`` with the zero-baseline
rule of :func:`calculate_change`. Platforms present in only one period are
compared against an all-zero record rather than omitted.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Sequence

from sqlalchemy.orm import Session

from app.domain.ad_metrics import ImportPeriod
from app.domain.reporting import (
    ComparisonResult,
    PeriodSnapshot,
    PeriodTotals,
    PlatformComparison,
    PlatformPeriodData,
)
from app.repositories.monthly_summary_repository import MonthlySummaryRepository
from app.services.rollups import build_period_totals, calculate_change, safe_ratio
from db.models.monthly_summary import MonthlySummary

logger = logging.getLogger(__name__)

_PERIOD_CHANGE_FIELDS: tuple[str, ...] = (
    "total_spend",
    "total_impressions",
    "total_clicks",
    "total_purchases",
    "total_revenue",
    "avg_ctr",
    "avg_cpm",
    "avg_cpc",
    "avg_roas",
)

_PLATFORM_CHANGE_FIELDS: tuple[str, ...] = (
    "spend",
    "impressions",
    "clicks",
    "ctr",
    "purchases",
    "revenue",
    "roas",
)


def platform_period_data(summary: MonthlySummary | None) -> PlatformPeriodData:
    """
    One platform's figures for one period; absent data is all zeros.
    """

    if summary is None:
        return PlatformPeriodData()

    spend = float(summary.total_spend or 0)
    impressions = int(summary.total_impressions or 0)
    return PlatformPeriodData(
        spend=spend,
        impressions=impressions,
        clicks=int(summary.total_clicks or 0),
        ctr=float(summary.avg_ctr or 0),
        cpm=safe_ratio(spend, impressions, scale=1000),
        purchases=int(summary.total_purchases or 0),
        revenue=float(summary.total_revenue or 0),
        roas=float(summary.avg_roas or 0),
    )


def compare_totals(previous: PeriodTotals, current: PeriodTotals) -> dict[str, float | None]:
    return {
        name: calculate_change(getattr(current, name), getattr(previous, name))
        for name in _PERIOD_CHANGE_FIELDS
    }


def build_platform_comparison(
    period1_rows: Sequence[MonthlySummary],
    period2_rows: Sequence[MonthlySummary],
) -> list[PlatformComparison]:
    """
    Per-platform comparison, sorted by period-2 spend descending.
    """

    first = {row.platform: row for row in period1_rows}
    second = {row.platform: row for row in period2_rows}
    platforms = list(dict.fromkeys([*first, *second]))

    comparisons: list[PlatformComparison] = []
    for platform in platforms:
        p1 = platform_period_data(first.get(platform))
        p2 = platform_period_data(second.get(platform))
        comparisons.append(
            PlatformComparison(
                platform=platform,
                period1=p1,
                period2=p2,
                changes={
                    name: calculate_change(getattr(p2, name), getattr(p1, name))
                    for name in _PLATFORM_CHANGE_FIELDS
                },
            )
        )

    comparisons.sort(key=lambda item: item.period2.spend, reverse=True)
    return comparisons


class ComparisonService:
    """
    Reads two months of summaries and produces deltas. Read-only.
    """

    def get_comparison(
        self,
        *,
        db: Session,
        period1: ImportPeriod,
        period2: ImportPeriod,
    ) -> ComparisonResult:
        repository = MonthlySummaryRepository(db)
        period1_rows = repository.find_by_month(period1.month_start)
        period2_rows = repository.find_by_month(period2.month_start)
        logger.debug(
            "Comparison requested period1=%s rows=%d period2=%s rows=%d",
            period1.label,
            len(period1_rows),
            period2.label,
            len(period2_rows),
        )

        totals1 = build_period_totals(period1_rows)
        totals2 = build_period_totals(period2_rows)

        return ComparisonResult(
            period1=PeriodSnapshot(
                date=period1.month_start,
                label=period1.label,
                totals=totals1,
                platform_count=len(period1_rows),
            ),
            period2=PeriodSnapshot(
                date=period2.month_start,
                label=period2.label,
                totals=totals2,
                platform_count=len(period2_rows),
            ),
            changes=compare_totals(totals1, totals2),
            platform_comparison=build_platform_comparison(period1_rows, period2_rows),
        )


@lru_cache(maxsize=1)
def get_comparison_service() -> ComparisonService:
    return ComparisonService()
