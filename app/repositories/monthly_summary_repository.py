"""
app/repositories/monthly_summary_repository.py

Read-only queries over MonthlySummary for the reporting layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.domain.ad_metrics import ImportPeriod
from db.models.monthly_summary import MonthlySummary


@dataclass(frozen=True)
class MonthlySummaryFilters:
    """
    Query filters. A complete start/end range wins over year/month; a
    year alone selects that calendar year.
    """

    year: int | None = None
    month: int | None = None
    platform: str | None = None
    start_year: int | None = None
    start_month: int | None = None
    end_year: int | None = None
    end_month: int | None = None

    @property
    def has_range(self) -> bool:
        return all(
            value is not None
            for value in (self.start_year, self.start_month, self.end_year, self.end_month)
        )


def _apply_filters(
    stmt: Select[tuple[MonthlySummary]],
    filters: MonthlySummaryFilters,
) -> Select[tuple[MonthlySummary]]:
    if filters.has_range:
        start = ImportPeriod(year=filters.start_year, month=filters.start_month)  # type: ignore[arg-type]
        end = ImportPeriod(year=filters.end_year, month=filters.end_month)  # type: ignore[arg-type]
        stmt = stmt.where(
            MonthlySummary.month >= start.month_start,
            MonthlySummary.month <= end.month_end,
        )
    elif filters.year is not None and filters.month is not None:
        stmt = stmt.where(
            MonthlySummary.month == ImportPeriod(year=filters.year, month=filters.month).month_start
        )
    elif filters.year is not None:
        stmt = stmt.where(
            MonthlySummary.month >= date(filters.year, 1, 1),
            MonthlySummary.month <= date(filters.year, 12, 31),
        )

    if filters.platform:
        stmt = stmt.where(MonthlySummary.platform == filters.platform)
    return stmt


class MonthlySummaryRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def find_many(self, filters: MonthlySummaryFilters) -> list[MonthlySummary]:
        """
        Summaries matching ``filters``, newest month first, then platform.
        """

        stmt = _apply_filters(select(MonthlySummary), filters).order_by(
            MonthlySummary.month.desc(),
            MonthlySummary.platform.asc(),
        )
        return list(self._session.scalars(stmt).all())

    def find_by_month(self, month: date) -> list[MonthlySummary]:
        """
        Every platform's summary for one month, highest spend first.
        """

        stmt = (
            select(MonthlySummary)
            .where(MonthlySummary.month == month)
            .order_by(MonthlySummary.total_spend.desc())
        )
        return list(self._session.scalars(stmt).all())

    def list_all_by_month_desc(self) -> list[MonthlySummary]:
        stmt = select(MonthlySummary).order_by(MonthlySummary.month.desc())
        return list(self._session.scalars(stmt).all())
