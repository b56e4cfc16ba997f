"""
app/services/totals_accumulator.py

In-memory, per-platform running totals for one import batch.

Rates are averaged per row ("average of per-row ratios"): each of CTR,
CPM, CPC and ROAS keeps its own sum/count pair that only moves when the
row produced a value for that metric. Finalization falls back to
ratio-of-sums for CPM, CPC and ROAS when no row carried a value; CTR has
no fallback.

No I/O happens here; the import service owns persistence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.domain.ad_metrics import CanonicalMetric, SummaryValues

logger = logging.getLogger(__name__)


@dataclass
class RateSample:
    total: float = 0.0
    count: int = 0

    def add(self, value: float | None) -> None:
        if value is None:
            return
        self.total += value
        self.count += 1

    def mean(self) -> float | None:
        return self.total / self.count if self.count > 0 else None


@dataclass
class PlatformTotals:
    """
    Running sums for one platform within one batch.
    """

    total_spend: float = 0.0
    total_impressions: int = 0
    total_clicks: int = 0
    total_video_views: int = 0
    total_purchases: int = 0
    total_revenue: float = 0.0
    row_count: int = 0
    ctr: RateSample = field(default_factory=RateSample)
    cpm: RateSample = field(default_factory=RateSample)
    cpc: RateSample = field(default_factory=RateSample)
    roas: RateSample = field(default_factory=RateSample)

    def add(self, metric: CanonicalMetric) -> None:
        self.total_spend += metric.spend
        self.total_impressions += metric.impressions
        self.total_clicks += metric.clicks or 0
        self.total_video_views += metric.video_views or 0
        self.total_purchases += metric.purchases or 0
        self.total_revenue += metric.purchase_value or 0.0
        self.row_count += 1

        self.ctr.add(metric.ctr)
        self.cpm.add(metric.cpm)
        self.cpc.add(metric.cpc)
        self.roas.add(metric.roas)

    def finalize(self) -> SummaryValues:
        """
        Compute monthly-summary field values.

        Zero counter totals are reported as None; ``campaign_count`` is
        the number of accepted rows, not distinct campaigns.
        """

        avg_cpm = self.cpm.mean()
        if avg_cpm is None and self.total_impressions > 0:
            avg_cpm = self.total_spend * 1000 / self.total_impressions

        avg_cpc = self.cpc.mean()
        if avg_cpc is None and self.total_clicks > 0:
            avg_cpc = self.total_spend / self.total_clicks

        avg_roas = self.roas.mean()
        if avg_roas is None and self.total_revenue > 0 and self.total_spend > 0:
            avg_roas = self.total_revenue / self.total_spend

        return SummaryValues(
            total_spend=self.total_spend,
            total_impressions=self.total_impressions,
            total_clicks=self.total_clicks or None,
            total_video_views=self.total_video_views or None,
            total_purchases=self.total_purchases or None,
            total_revenue=self.total_revenue or None,
            avg_ctr=self.ctr.mean(),
            avg_cpm=avg_cpm,
            avg_cpc=avg_cpc,
            avg_roas=avg_roas,
            campaign_count=self.row_count,
        )


class TotalsAccumulator:
    """
    Folds CanonicalMetric rows into per-platform buckets. Never fails.

    Buckets are local to one batch; platforms keep first-seen order.
    """

    def __init__(self) -> None:
        self._totals: dict[str, PlatformTotals] = {}

    def add(self, metric: CanonicalMetric) -> None:
        self._totals.setdefault(metric.platform, PlatformTotals()).add(metric)

    @property
    def platforms(self) -> list[str]:
        return list(self._totals)

    def finalize(self) -> dict[str, SummaryValues]:
        finalized = {platform: totals.finalize() for platform, totals in self._totals.items()}
        logger.debug("Accumulator finalized platforms=%s", list(finalized))
        return finalized
