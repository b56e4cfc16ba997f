"""
app/services/ad_import_service.py

Service layer for ad-performance CSV imports.

One call to :meth:`AdImportService.import_csv` runs the whole pipeline:

    1. parse_csv           : locate header, tokenize rows, drop unknown platforms
    2. resolve_period      : override, then content, then filename, then today
    3. RowNormalizer       : canonical metrics; rows without impressions are skipped
    4. upsert per row      : find-or-create Campaign, create-or-update CampaignMetric,
                             fold into TotalsAccumulator
    5. summaries           : find-or-create MonthlySummary per touched platform and
                             overwrite it per the configured SummaryPolicy

Steps 4 and 5 share one transaction, committed once at the end. Any store
failure rolls the whole import back, so metric rows never exist without
the summary rewrite that belongs to them. Re-running an import converges:
every write is keyed by natural identity.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from functools import lru_cache
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import SummaryPolicy, get_ad_import_settings, normalize_summary_policy
from app.domain.ad_metrics import (
    AdImportResult,
    CanonicalMetric,
    ImportPeriod,
    SkippedRow,
    SummaryValues,
)
from app.domain.reporting import ReportPeriod, ReportPeriodsData
from app.mappers.row_normalizer import RowNormalizer
from app.parsers.csv_parser import parse_csv
from app.parsers.period_resolver import resolve_period
from app.repositories.ad_metrics_repository import AdMetricsRepository
from app.repositories.monthly_summary_repository import MonthlySummaryRepository
from app.services.totals_accumulator import PlatformTotals, TotalsAccumulator
from db.models.campaign import Campaign
from db.models.campaign_metric import REGION_ALL, CampaignMetric

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AdImportError(RuntimeError):
    """
    Base class for whole-import failures.
    """


class NoValidRowsError(AdImportError):
    """
    Raised when parsing and normalization leave nothing to persist.
    """


class AdImportPersistenceError(AdImportError):
    """
    Raised when a store operation fails; the import has been rolled back.
    """


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def campaign_name_for(platform: str, period: ImportPeriod) -> str:
    """Deterministic campaign name: one campaign per platform per month."""
    return f"{platform} - {period.month_name} {period.year}"


def _metric_from_row(platform: str, row: CampaignMetric) -> CanonicalMetric:
    return CanonicalMetric(
        platform=platform,
        impressions=row.impressions,
        spend=float(row.spend or 0.0),
        clicks=row.clicks,
        ctr=row.ctr,
        cpm=row.cpm,
        cpc=row.cpc,
        video_views=row.video_views,
        video_view_rate=row.video_view_rate,
        purchases=row.purchases,
        purchase_value=row.purchase_value,
        roas=row.roas,
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AdImportService:
    """
    Coordinates parsing, normalization, keyed upserts and summary rewrites.
    """

    def __init__(
        self,
        *,
        summary_policy: str = SummaryPolicy.REPLACE,
        max_skip_details: int = 200,
        log_skipped_rows: bool = True,
        region: str = REGION_ALL,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._summary_policy = normalize_summary_policy(summary_policy)
        self._max_skip_details = max(0, max_skip_details)
        self._log_skipped_rows = log_skipped_rows
        self._region = region
        self._today = today

    @property
    def summary_policy(self) -> str:
        return self._summary_policy

    def import_csv(
        self,
        *,
        db: Session,
        file_content: str,
        file_name: str,
        year: int | None = None,
        month: int | None = None,
    ) -> AdImportResult:
        """
        Import one export file.

        Args:
            db:            Active SQLAlchemy session (caller owns lifecycle).
            file_content:  Decoded file text.
            file_name:     Display name, used as a period hint.
            year, month:   Explicit period; used only when both are given.

        Raises:
            HeaderNotFoundError:       no header row in the file.
            NoValidRowsError:          no row survived parsing and normalization.
            AdImportPersistenceError:  a store write failed; nothing was kept.
        """

        parsed = parse_csv(file_content)
        resolved = resolve_period(
            file_content,
            file_name,
            year=year,
            month=month,
            today=self._today,
        )
        period = resolved.period

        normalizer = RowNormalizer(parsed.headers)
        metrics: list[CanonicalMetric] = []
        skipped: list[SkippedRow] = list(parsed.skipped)
        for row in parsed.rows:
            metric, skip = normalizer.normalize(row)
            if metric is not None:
                metrics.append(metric)
            elif skip is not None:
                skipped.append(skip)

        for skip in skipped:
            self._log_skip(skip, file_name)

        if not metrics:
            raise NoValidRowsError("No valid data found in CSV")

        logger.info(
            "Ad import started file=%r period=%s source=%s rows=%d skipped=%d policy=%s",
            file_name,
            period.label,
            resolved.source,
            len(metrics),
            len(skipped),
            self._summary_policy,
        )

        repository = AdMetricsRepository(db)
        try:
            created, updated, accumulator = self._upsert_metrics(
                repository=repository,
                metrics=metrics,
                period=period,
            )
            summary_platforms = self._write_summaries(
                repository=repository,
                accumulator=accumulator,
                period=period,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Ad import rolled back file=%r period=%s: %s",
                file_name,
                period.label,
                exc,
            )
            raise AdImportPersistenceError("Failed to persist imported ad metrics.") from exc

        logger.info(
            "Ad import completed file=%r period=%s created=%d updated=%d summaries=%s",
            file_name,
            period.label,
            created,
            updated,
            summary_platforms,
        )

        return AdImportResult(
            period=period,
            period_source=resolved.source,
            created=created,
            updated=updated,
            summary_platforms=summary_platforms,
            skipped_count=len(skipped),
            skipped_by_reason=dict(Counter(skip.reason for skip in skipped)),
            skipped_rows=skipped[: self._max_skip_details],
        )

    def get_report_periods(self, *, db: Session) -> ReportPeriodsData:
        """
        Every month that has summaries, newest first, with per-month rollups.
        """

        summaries = MonthlySummaryRepository(db).list_all_by_month_desc()

        by_month: dict[date, ReportPeriod] = {}
        years: set[int] = set()
        for summary in summaries:
            years.add(summary.month.year)
            existing = by_month.get(summary.month)
            if existing is None:
                period = ImportPeriod.from_date(summary.month)
                by_month[summary.month] = ReportPeriod(
                    year=period.year,
                    month=period.month,
                    label=period.label,
                    month_name=period.month_name,
                    platform_count=1,
                    campaign_count=summary.campaign_count,
                    total_spend=float(summary.total_spend),
                    total_impressions=int(summary.total_impressions),
                )
                continue
            existing.platform_count += 1
            existing.campaign_count += summary.campaign_count
            existing.total_spend += float(summary.total_spend)
            existing.total_impressions += int(summary.total_impressions)

        periods = sorted(by_month.values(), key=lambda p: (p.year, p.month), reverse=True)
        return ReportPeriodsData(
            periods=periods,
            years=sorted(years, reverse=True),
            total_spend=sum(p.total_spend for p in periods),
            total_impressions=sum(p.total_impressions for p in periods),
        )

    # ------------------------------------------------------------------
    # Import internals
    # ------------------------------------------------------------------

    def _upsert_metrics(
        self,
        *,
        repository: AdMetricsRepository,
        metrics: list[CanonicalMetric],
        period: ImportPeriod,
    ) -> tuple[int, int, TotalsAccumulator]:
        created = 0
        updated = 0
        accumulator = TotalsAccumulator()
        report_date = period.month_start

        for metric in metrics:
            campaign = self._find_or_create_campaign(repository, metric.platform, period)
            values = metric.metric_values()

            existing = repository.find_campaign_metric(
                campaign_id=campaign.id,
                report_date=report_date,
                region=self._region,
            )
            if existing is not None:
                repository.update_campaign_metric(existing, values)
                updated += 1
                logger.debug("Campaign metric updated campaign=%r", campaign.name)
            else:
                repository.create_campaign_metric(
                    campaign_id=campaign.id,
                    report_date=report_date,
                    region=self._region,
                    values=values,
                )
                created += 1
                logger.debug("Campaign metric created campaign=%r", campaign.name)

            accumulator.add(metric)

        return created, updated, accumulator

    def _find_or_create_campaign(
        self,
        repository: AdMetricsRepository,
        platform: str,
        period: ImportPeriod,
    ) -> Campaign:
        name = campaign_name_for(platform, period)
        campaign = repository.find_campaign(name=name, platform=platform)
        if campaign is None:
            campaign = repository.create_campaign(
                name=name,
                platform=platform,
                start_date=period.month_start,
                end_date=period.month_end,
            )
            logger.debug("Campaign created name=%r", name)
        return campaign

    def _write_summaries(
        self,
        *,
        repository: AdMetricsRepository,
        accumulator: TotalsAccumulator,
        period: ImportPeriod,
    ) -> list[str]:
        finalized = accumulator.finalize()
        written: list[str] = []

        for platform in accumulator.platforms:
            if self._summary_policy == SummaryPolicy.RECOMPUTE:
                values = self._recompute_summary(repository, platform, period)
            else:
                values = finalized[platform]

            summary = repository.find_monthly_summary(platform=platform, month=period.month_start)
            if summary is not None:
                repository.update_monthly_summary(summary, values.as_dict())
            else:
                repository.create_monthly_summary(
                    platform=platform,
                    month=period.month_start,
                    values=values.as_dict(),
                )
            written.append(platform)

        return written

    def _recompute_summary(
        self,
        repository: AdMetricsRepository,
        platform: str,
        period: ImportPeriod,
    ) -> SummaryValues:
        totals = PlatformTotals()
        for row in repository.list_campaign_metrics_for_month(
            platform=platform,
            month_start=period.month_start,
            month_end=period.month_end,
        ):
            totals.add(_metric_from_row(platform, row))
        return totals.finalize()

    def _log_skip(self, skip: SkippedRow, file_name: str) -> None:
        if not self._log_skipped_rows:
            return
        logger.warning(
            "Ad import row skipped file=%r line=%d reason=%s platform=%r",
            file_name,
            skip.line_number,
            skip.reason,
            skip.platform_label,
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_ad_import_service() -> AdImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_ad_import_settings()
    return AdImportService(
        summary_policy=settings.summary_policy,
        max_skip_details=settings.max_skip_details,
        log_skipped_rows=settings.log_skipped_rows,
        region=settings.region_sentinel,
    )
