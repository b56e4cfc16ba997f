"""
app/domain/ad_metrics.py

Typed records flowing through the ad-performance import pipeline.

    RawRow  ->  CanonicalMetric  ->  (CampaignMetric row, PlatformTotals)

Everything downstream of the CSV parser works on these dataclasses rather
than on header-keyed dicts.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping


class InvalidPeriodError(ValueError):
    """
    Raised when a (year, month) pair cannot describe a reporting month.
    """


class PeriodSource:
    OVERRIDE = "override"
    CONTENT = "content"
    FILENAME = "filename"
    DEFAULT = "default"


class SkipReason:
    UNKNOWN_PLATFORM = "unknown_platform"
    MISSING_IMPRESSIONS = "missing_impressions"


@dataclass(frozen=True)
class ImportPeriod:
    """
    Reporting month of one import batch.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidPeriodError(f"month must be within 1-12, got {self.month}.")
        if not 1 <= self.year <= 9999:
            raise InvalidPeriodError(f"year must be within 1-9999, got {self.year}.")

    @property
    def month_start(self) -> date:
        """First calendar day; the key used for every persisted record."""
        return date(self.year, self.month, 1)

    @property
    def month_end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def label(self) -> str:
        return f"{self.month_name} {self.year}"

    @classmethod
    def from_date(cls, value: date) -> "ImportPeriod":
        return cls(year=value.year, month=value.month)


@dataclass(frozen=True)
class ResolvedPeriod:
    """
    Period plus the signal it was recovered from (see ``PeriodSource``).
    """

    period: ImportPeriod
    source: str


@dataclass(frozen=True)
class RawRow:
    """
    One data line of an export, zipped against the file's header list.
    """

    line_number: int
    cells: Mapping[str, str]

    def get(self, header: str) -> str:
        return self.cells.get(header, "")


@dataclass(frozen=True)
class ParsedCSV:
    """
    Output of the CSV parser: header order plus retained rows.
    """

    headers: tuple[str, ...]
    rows: list[RawRow]
    skipped: list["SkippedRow"] = field(default_factory=list)


@dataclass(frozen=True)
class CanonicalMetric:
    """
    Unit-consistent representation of one accepted export row.

    ``impressions`` is always > 0; rows without it never get this far.
    """

    platform: str
    impressions: int
    spend: float
    clicks: int | None = None
    ctr: float | None = None
    cpm: float | None = None
    cpc: float | None = None
    video_views: int | None = None
    video_view_rate: float | None = None
    purchases: int | None = None
    purchase_value: float | None = None
    roas: float | None = None

    def metric_values(self) -> dict[str, int | float | None]:
        """Column values for a CampaignMetric row (everything but platform)."""
        return {
            "impressions": self.impressions,
            "clicks": self.clicks,
            "spend": self.spend,
            "ctr": self.ctr,
            "cpm": self.cpm,
            "cpc": self.cpc,
            "video_views": self.video_views,
            "video_view_rate": self.video_view_rate,
            "purchases": self.purchases,
            "purchase_value": self.purchase_value,
            "roas": self.roas,
        }


@dataclass(frozen=True)
class SkippedRow:
    """
    A data line dropped by policy rather than by error.
    """

    line_number: int
    reason: str
    platform_label: str | None = None


@dataclass(frozen=True)
class SummaryValues:
    """
    Finalized monthly-summary field values for one platform.
    """

    total_spend: float
    total_impressions: int
    total_clicks: int | None
    total_video_views: int | None
    total_purchases: int | None
    total_revenue: float | None
    avg_ctr: float | None
    avg_cpm: float | None
    avg_cpc: float | None
    avg_roas: float | None
    campaign_count: int

    def as_dict(self) -> dict[str, int | float | None]:
        return {
            "total_spend": self.total_spend,
            "total_impressions": self.total_impressions,
            "total_clicks": self.total_clicks,
            "total_video_views": self.total_video_views,
            "total_purchases": self.total_purchases,
            "total_revenue": self.total_revenue,
            "avg_ctr": self.avg_ctr,
            "avg_cpm": self.avg_cpm,
            "avg_cpc": self.avg_cpc,
            "avg_roas": self.avg_roas,
            "campaign_count": self.campaign_count,
        }


@dataclass(frozen=True)
class AdImportResult:
    """
    End-of-run import summary.
    """

    period: ImportPeriod
    period_source: str
    created: int
    updated: int
    summary_platforms: list[str]
    skipped_count: int = 0
    skipped_by_reason: dict[str, int] = field(default_factory=dict)
    skipped_rows: list[SkippedRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created + self.updated
