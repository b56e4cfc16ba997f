"""
tests/test_ad_import_service.py

Integration tests for AdImportService against an in-memory SQLite database.

Coverage
--------
- End-to-end import: period detection, keyed upserts, summaries, skip report
- Idempotent re-import
- Replace vs recompute summary policies
- Whole-import failures (no header, no valid rows, store failure rollback)
- Report period listing
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import SummaryPolicy
from app.domain.ad_metrics import ImportPeriod, PeriodSource, SkipReason
from app.parsers import HeaderNotFoundError
from app.repositories.ad_metrics_repository import AdMetricsRepository
from app.services.ad_import_service import (
    AdImportPersistenceError,
    AdImportService,
    NoValidRowsError,
    campaign_name_for,
)
from db.models import Campaign, CampaignMetric, MonthlySummary, Platform


def _count(db: Session, model: type) -> int:
    return db.scalar(select(func.count()).select_from(model)) or 0


def _summary(db: Session, platform: str, month: date) -> MonthlySummary:
    summary = db.scalars(
        select(MonthlySummary).where(
            MonthlySummary.platform == platform,
            MonthlySummary.month == month,
        )
    ).one()
    return summary


# ---------------------------------------------------------------------------
# End-to-end import
# ---------------------------------------------------------------------------


class TestImportCsv:
    def test_end_to_end_import(
        self,
        db_session: Session,
        import_service: AdImportService,
        litto_april_csv: str,
    ) -> None:
        result = import_service.import_csv(
            db=db_session,
            file_content=litto_april_csv,
            file_name="report_2024.csv",
        )

        assert result.period == ImportPeriod(2025, 4)
        assert result.period_source == PeriodSource.CONTENT
        assert result.created == 2
        assert result.updated == 0
        assert result.total == 2
        assert result.summary_platforms == [Platform.META, Platform.TIKTOK]
        assert result.skipped_count == 2
        assert result.skipped_by_reason == {
            SkipReason.UNKNOWN_PLATFORM: 1,
            SkipReason.MISSING_IMPRESSIONS: 1,
        }
        assert [skip.line_number for skip in result.skipped_rows] == [6, 7]

        campaign = db_session.scalars(
            select(Campaign).where(Campaign.platform == Platform.META)
        ).one()
        assert campaign.name == "META - April 2025"
        assert campaign.start_date == date(2025, 4, 1)
        assert campaign.end_date == date(2025, 4, 30)

        metric = db_session.scalars(
            select(CampaignMetric).where(CampaignMetric.campaign_id == campaign.id)
        ).one()
        assert metric.report_date == date(2025, 4, 1)
        assert metric.region == "ALL"
        assert metric.impressions == 85452
        assert metric.clicks == 3428
        assert metric.spend == pytest.approx(618.92)
        assert metric.ctr == pytest.approx(0.0538)
        assert metric.cpm == pytest.approx(7.2429, rel=1e-3)
        assert metric.video_views is None

        meta = _summary(db_session, Platform.META, date(2025, 4, 1))
        assert meta.total_impressions == 85452
        assert meta.total_spend == pytest.approx(618.92)
        assert meta.avg_ctr == pytest.approx(0.0538)
        assert meta.total_video_views is None
        assert meta.campaign_count == 1

    def test_reimport_is_idempotent(
        self,
        db_session: Session,
        import_service: AdImportService,
        litto_april_csv: str,
    ) -> None:
        import_service.import_csv(db=db_session, file_content=litto_april_csv, file_name="a.csv")
        first = _summary(db_session, Platform.META, date(2025, 4, 1))
        first_values = (first.total_spend, first.total_impressions, first.avg_ctr, first.campaign_count)

        result = import_service.import_csv(
            db=db_session,
            file_content=litto_april_csv,
            file_name="a.csv",
        )

        assert result.created == 0
        assert result.updated == 2
        assert _count(db_session, Campaign) == 2
        assert _count(db_session, CampaignMetric) == 2
        assert _count(db_session, MonthlySummary) == 2

        second = _summary(db_session, Platform.META, date(2025, 4, 1))
        assert (
            second.total_spend,
            second.total_impressions,
            second.avg_ctr,
            second.campaign_count,
        ) == first_values

    def test_override_period_is_used(
        self,
        db_session: Session,
        import_service: AdImportService,
        litto_april_csv: str,
    ) -> None:
        result = import_service.import_csv(
            db=db_session,
            file_content=litto_april_csv,
            file_name="a.csv",
            year=2024,
            month=12,
        )

        assert result.period == ImportPeriod(2024, 12)
        assert result.period_source == PeriodSource.OVERRIDE
        assert _summary(db_session, Platform.META, date(2024, 12, 1)) is not None

    def test_duplicate_platform_rows_share_one_metric_record(
        self,
        db_session: Session,
        import_service: AdImportService,
    ) -> None:
        content = "Platform,Impressions,Cost\nMeta,1000,$10\nMeta Ads,3000,$20\n"

        result = import_service.import_csv(
            db=db_session,
            file_content=content,
            file_name="march_2025.csv",
        )

        assert result.created == 1
        assert result.updated == 1
        assert _count(db_session, CampaignMetric) == 1
        summary = _summary(db_session, Platform.META, date(2025, 3, 1))
        assert summary.total_impressions == 4000
        assert summary.total_spend == pytest.approx(30.0)
        assert summary.campaign_count == 2

    def test_oversized_cells_skip_the_row_instead_of_failing(
        self,
        db_session: Session,
        import_service: AdImportService,
    ) -> None:
        content = (
            "Platform,Impressions,Cost\n"
            "Meta,99999999999999999999999,$10\n"
            "X,1e400,$5\n"
            "LinkedIn,500,$20\n"
        )

        result = import_service.import_csv(db=db_session, file_content=content, file_name="may_2025.csv")

        assert result.created == 1
        assert result.summary_platforms == [Platform.LINKEDIN]
        assert result.skipped_by_reason == {SkipReason.MISSING_IMPRESSIONS: 2}
        assert _count(db_session, CampaignMetric) == 1

    def test_skip_details_are_capped(self, db_session: Session) -> None:
        service = AdImportService(max_skip_details=1, log_skipped_rows=False)
        content = "Platform,Impressions\nMeta,100\nFoo,1\nBar,2\nBaz,3\n"

        result = service.import_csv(db=db_session, file_content=content, file_name="may_2025.csv")

        assert result.skipped_count == 3
        assert len(result.skipped_rows) == 1

    def test_campaign_name_format(self) -> None:
        assert campaign_name_for(Platform.VIBE_CTV, ImportPeriod(2025, 1)) == "VIBE_CTV - January 2025"


# ---------------------------------------------------------------------------
# Summary policies
# ---------------------------------------------------------------------------


class TestSummaryPolicy:
    SECOND_BATCH = "Platform,Impressions,Cost\nMeta,2000,$40\n"

    def _seed_other_campaign_metric(self, db: Session) -> None:
        repository = AdMetricsRepository(db)
        campaign = repository.create_campaign(
            name="META - Spring promo",
            platform=Platform.META,
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 30),
        )
        repository.create_campaign_metric(
            campaign_id=campaign.id,
            report_date=date(2025, 4, 15),
            region="ALL",
            values={"impressions": 1000, "spend": 10.0, "cpm": 10.0},
        )
        db.commit()

    def test_replace_uses_only_the_batch(self, db_session: Session) -> None:
        self._seed_other_campaign_metric(db_session)
        service = AdImportService(summary_policy=SummaryPolicy.REPLACE)

        service.import_csv(db=db_session, file_content=self.SECOND_BATCH, file_name="april_2025.csv")

        summary = _summary(db_session, Platform.META, date(2025, 4, 1))
        assert summary.total_impressions == 2000
        assert summary.total_spend == pytest.approx(40.0)
        assert summary.campaign_count == 1

    def test_recompute_uses_every_stored_row_of_the_month(self, db_session: Session) -> None:
        self._seed_other_campaign_metric(db_session)
        service = AdImportService(summary_policy=SummaryPolicy.RECOMPUTE)

        service.import_csv(db=db_session, file_content=self.SECOND_BATCH, file_name="april_2025.csv")

        summary = _summary(db_session, Platform.META, date(2025, 4, 1))
        assert summary.total_impressions == 3000
        assert summary.total_spend == pytest.approx(50.0)
        assert summary.avg_cpm == pytest.approx(15.0)
        assert summary.campaign_count == 2

    def test_unknown_policy_falls_back_to_replace(self) -> None:
        assert AdImportService(summary_policy="merge").summary_policy == SummaryPolicy.REPLACE


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestImportFailures:
    def test_missing_header_writes_nothing(
        self,
        db_session: Session,
        import_service: AdImportService,
    ) -> None:
        with pytest.raises(HeaderNotFoundError):
            import_service.import_csv(
                db=db_session,
                file_content="Channel,Views\nMeta,100\n",
                file_name="x.csv",
            )

        assert _count(db_session, Campaign) == 0

    def test_no_valid_rows_raises(self, db_session: Session, import_service: AdImportService) -> None:
        with pytest.raises(NoValidRowsError, match="No valid data found in CSV"):
            import_service.import_csv(
                db=db_session,
                file_content="Platform,Impressions\nSnapchat,100\nMeta,-\n",
                file_name="x.csv",
            )

        assert _count(db_session, CampaignMetric) == 0

    def test_store_failure_rolls_back_the_whole_import(
        self,
        db_session: Session,
        import_service: AdImportService,
        litto_april_csv: str,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def _fail(self: AdMetricsRepository, **kwargs: object) -> MonthlySummary:
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(AdMetricsRepository, "create_monthly_summary", _fail)

        with pytest.raises(AdImportPersistenceError):
            import_service.import_csv(
                db=db_session,
                file_content=litto_april_csv,
                file_name="a.csv",
            )

        assert _count(db_session, Campaign) == 0
        assert _count(db_session, CampaignMetric) == 0
        assert _count(db_session, MonthlySummary) == 0


# ---------------------------------------------------------------------------
# Report periods
# ---------------------------------------------------------------------------


class TestReportPeriods:
    def test_lists_months_newest_first(self, db_session: Session, import_service: AdImportService) -> None:
        import_service.import_csv(
            db=db_session,
            file_content="Platform,Impressions,Cost\nMeta,1000,$10\nX,500,$5\n",
            file_name="march_2025.csv",
        )
        import_service.import_csv(
            db=db_session,
            file_content="Platform,Impressions,Cost\nMeta,2000,$20\n",
            file_name="january_2024.csv",
        )

        data = import_service.get_report_periods(db=db_session)

        assert [(p.year, p.month) for p in data.periods] == [(2025, 3), (2024, 1)]
        assert data.years == [2025, 2024]
        march = data.periods[0]
        assert march.label == "March 2025"
        assert march.platform_count == 2
        assert march.total_spend == pytest.approx(15.0)
        assert march.total_impressions == 1500
        assert data.total_spend == pytest.approx(35.0)
        assert data.total_impressions == 3500

    def test_empty_store(self, db_session: Session, import_service: AdImportService) -> None:
        data = import_service.get_report_periods(db=db_session)

        assert data.periods == []
        assert data.years == []
        assert data.total_spend == 0
