"""
tests/test_comparison_service.py

Tests for period-over-period comparison: totals, percentage changes and
the per-platform table.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from sqlalchemy.orm import Session

from app.domain.ad_metrics import ImportPeriod
from app.services.comparison_service import ComparisonService
from app.services.rollups import build_period_totals, calculate_change, safe_ratio
from db.models import Platform

@pytest.fixture()
def svc() -> ComparisonService:
    return ComparisonService()

@pytest.fixture()
def seeded(db_session: Session, add_summary: Callable[..., None]) -> Session:
    add_summary(
        db_session, Platform.META, 2025, 3,
        total_spend=100.0, total_impressions=10000, total_clicks=100,
        total_purchases=5, total_revenue=200.0, avg_ctr=0.01, avg_roas=2.0,
    )
    add_summary(
        db_session, Platform.X, 2025, 3,
        total_spend=50.0, total_impressions=5000, total_clicks=50,
    )
    add_summary(
        db_session, Platform.META, 2025, 4,
        total_spend=150.0, total_impressions=15000, total_clicks=150,
        total_revenue=300.0, avg_ctr=0.01, avg_roas=2.0,
    )
    add_summary(
        db_session, Platform.TIKTOK, 2025, 4,
        total_spend=200.0, total_impressions=20000,
    )
    return db_session

class TestCalculateChange:
    def test_regular_change(self) -> None:
        assert calculate_change(150.0, 100.0) == pytest.approx(50.0)
        assert calculate_change(50.0, 100.0) == pytest.approx(-50.0)

    def test_zero_baseline_with_growth_is_plus_100(self) -> None:
        assert calculate_change(5.0, 0) == 100.0

    def test_zero_baseline_without_growth_is_none(self) -> None:
        assert calculate_change(0, 0) is None

    def test_safe_ratio_zero_denominator(self) -> None:
        assert safe_ratio(10.0, 0) == 0.0
        assert safe_ratio(10.0, 4.0, scale=100) == pytest.approx(250.0)

class TestBuildPeriodTotals:
    def test_empty_rows_are_all_zero(self) -> None:
        totals = build_period_totals([])

        assert totals.total_spend == 0.0
        assert totals.avg_ctr == 0.0
        assert totals.avg_cpc == 0.0

class TestGetComparison:
    def test_period_totals_and_changes(self, svc: ComparisonService, seeded: Session) -> None:
        result = svc.get_comparison(
            db=seeded,
            period1=ImportPeriod(2025, 3),
            period2=ImportPeriod(2025, 4),
        )

        assert result.period1.label == "March 2025"
        assert result.period1.platform_count == 2
        assert result.period1.totals.total_spend == pytest.approx(150.0)
        assert result.period1.totals.avg_cpm == pytest.approx(10.0)
        assert result.period2.totals.total_spend == pytest.approx(350.0)
        assert result.period2.totals.avg_cpc == pytest.approx(350.0 / 150)

        assert result.changes["total_spend"] == pytest.approx(200.0 / 150 * 100)
        assert result.changes["total_clicks"] == pytest.approx(0.0)
        assert result.changes["avg_cpm"] == pytest.approx(0.0)
        assert result.changes["total_purchases"] == pytest.approx(-100.0)

    def test_platforms_sorted_by_current_spend(self, svc: ComparisonService, seeded: Session) -> None:
        result = svc.get_comparison(
            db=seeded,
            period1=ImportPeriod(2025, 3),
            period2=ImportPeriod(2025, 4),
        )

        assert [row.platform for row in result.platform_comparison] == [
            Platform.TIKTOK,
            Platform.META,
            Platform.X,
        ]

    def test_platform_missing_in_one_period_compares_against_zeros(
        self,
        svc: ComparisonService,
        seeded: Session,
    ) -> None:
        result = svc.get_comparison(
            db=seeded,
            period1=ImportPeriod(2025, 3),
            period2=ImportPeriod(2025, 4),
        )
        by_platform = {row.platform: row for row in result.platform_comparison}

        tiktok = by_platform[Platform.TIKTOK]
        assert tiktok.period1.spend == 0.0
        assert tiktok.changes["spend"] == 100.0
        assert tiktok.changes["clicks"] is None

        x = by_platform[Platform.X]
        assert x.period2.impressions == 0
        assert x.changes["spend"] == pytest.approx(-100.0)

        meta = by_platform[Platform.META]
        assert meta.period2.cpm == pytest.approx(10.0)
        assert meta.changes["spend"] == pytest.approx(50.0)
        assert meta.changes["roas"] == pytest.approx(0.0)

    def test_empty_periods(self, svc: ComparisonService, db_session: Session) -> None:
        result = svc.get_comparison(
            db=db_session,
            period1=ImportPeriod(2020, 1),
            period2=ImportPeriod(2020, 2),
        )

        assert result.platform_comparison == []
        assert all(change is None for change in result.changes.values())
