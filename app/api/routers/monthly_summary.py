"""
app/api/routers/monthly_summary.py

Monthly summary dashboard endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.repositories.monthly_summary_repository import MonthlySummaryFilters
from app.schemas.monthly_summary import MonthlySummaryResponse
from app.services.monthly_summary_service import (
    MonthlySummaryService,
    get_monthly_summary_service,
)
from db.session import get_db

router = APIRouter(tags=["reporting"])


@router.get("/monthly-summary", response_model=MonthlySummaryResponse)
def get_monthly_summary(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    platform: str | None = Query(default=None, description="Canonical platform name, e.g. META"),
    start_year: int | None = Query(default=None, ge=2000, le=2100),
    start_month: int | None = Query(default=None, ge=1, le=12),
    end_year: int | None = Query(default=None, ge=2000, le=2100),
    end_month: int | None = Query(default=None, ge=1, le=12),
    db: Session = Depends(get_db),
    summary_service: MonthlySummaryService = Depends(get_monthly_summary_service),
) -> MonthlySummaryResponse:
    filters = MonthlySummaryFilters(
        year=year,
        month=month,
        platform=platform.strip().upper() if platform else None,
        start_year=start_year,
        start_month=start_month,
        end_year=end_year,
        end_month=end_month,
    )
    report = summary_service.get_monthly_summary(db=db, filters=filters)
    return MonthlySummaryResponse.model_validate(report)
