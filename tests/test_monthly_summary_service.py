"""
tests/test_monthly_summary_service.py

Tests for the monthly summary dashboard rollup and its filters.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.repositories.monthly_summary_repository import MonthlySummaryFilters
from app.services.monthly_summary_service import MonthlySummaryService
from db.models import Platform

@pytest.fixture()
def svc() -> MonthlySummaryService:
    return MonthlySummaryService()

@pytest.fixture()
def seeded(db_session: Session, add_summary: Callable[..., None]) -> Session:
    add_summary(db_session, Platform.META, 2025, 3, total_spend=100.0, total_impressions=10000, total_clicks=200)
    add_summary(db_session, Platform.META, 2025, 4, total_spend=150.0, total_impressions=10000)
    add_summary(db_session, Platform.TIKTOK, 2025, 4, total_spend=200.0, total_impressions=40000)
    add_summary(db_session, Platform.X, 2024, 1, total_spend=50.0, total_impressions=5000)
    return db_session

class TestGetMonthlySummary:
    def test_unfiltered_report(self, svc: MonthlySummaryService, seeded: Session) -> None:
        report = svc.get_monthly_summary(db=seeded, filters=MonthlySummaryFilters())

        assert [(item.platform, item.month) for item in report.summaries] == [
            (Platform.META, date(2025, 4, 1)),
            (Platform.TIKTOK, date(2025, 4, 1)),
            (Platform.META, date(2025, 3, 1)),
            (Platform.X, date(2024, 1, 1)),
        ]
        assert report.summaries[0].month_name == "April 2025"
        assert report.summaries[0].total_clicks == 0
        assert report.totals.total_spend == pytest.approx(500.0)
        assert report.totals.total_impressions == 65000
        assert report.totals.avg_cpm == pytest.approx(500.0 / 65000 * 1000)

    def test_platform_breakdown_spend_share(self, svc: MonthlySummaryService, seeded: Session) -> None:
        report = svc.get_monthly_summary(db=seeded, filters=MonthlySummaryFilters())

        shares = {entry.platform: entry.spend_share for entry in report.platform_breakdown}
        assert [entry.platform for entry in report.platform_breakdown] == [
            Platform.META,
            Platform.TIKTOK,
            Platform.X,
        ]
        assert shares[Platform.META] == pytest.approx(50.0)
        assert shares[Platform.TIKTOK] == pytest.approx(40.0)
        assert shares[Platform.X] == pytest.approx(10.0)
        assert len(report.platform_breakdown[0].months) == 2

    def test_monthly_trend_is_chronological(self, svc: MonthlySummaryService, seeded: Session) -> None:
        report = svc.get_monthly_summary(db=seeded, filters=MonthlySummaryFilters())

        assert [trend.month for trend in report.monthly_trend] == [
            date(2024, 1, 1),
            date(2025, 3, 1),
            date(2025, 4, 1),
        ]
        april = report.monthly_trend[-1]
        assert april.total_spend == pytest.approx(350.0)
        assert april.platforms == [Platform.META, Platform.TIKTOK]

    @pytest.mark.parametrize(
        ("filters", "expected"),
        [
            (MonthlySummaryFilters(year=2025), 3),
            (MonthlySummaryFilters(year=2025, month=4), 2),
            (MonthlySummaryFilters(platform=Platform.META), 2),
            (MonthlySummaryFilters(start_year=2025, start_month=3, end_year=2025, end_month=4), 3),
            (MonthlySummaryFilters(year=2025, start_year=2024, start_month=1, end_year=2024, end_month=12), 1),
        ],
    )
    def test_filters(
        self,
        svc: MonthlySummaryService,
        seeded: Session,
        filters: MonthlySummaryFilters,
        expected: int,
    ) -> None:
        report = svc.get_monthly_summary(db=seeded, filters=filters)

        assert len(report.summaries) == expected

    def test_empty_store(self, svc: MonthlySummaryService, db_session: Session) -> None:
        report = svc.get_monthly_summary(db=db_session, filters=MonthlySummaryFilters())

        assert report.summaries == []
        assert report.platform_breakdown == []
        assert report.monthly_trend == []
        assert report.totals.total_spend == 0.0
