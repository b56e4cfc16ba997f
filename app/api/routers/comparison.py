"""
app/api/routers/comparison.py

Period-over-period comparison endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.domain.ad_metrics import ImportPeriod, InvalidPeriodError
from app.schemas.comparison import ComparisonResponse
from app.services.comparison_service import ComparisonService, get_comparison_service
from db.session import get_db

router = APIRouter(tags=["reporting"])


@router.get("/compare", response_model=ComparisonResponse)
def compare_periods(
    month1_year: int = Query(..., description="Baseline year"),
    month1_month: int = Query(..., description="Baseline month (1-12)"),
    month2_year: int = Query(..., description="Current year"),
    month2_month: int = Query(..., description="Current month (1-12)"),
    db: Session = Depends(get_db),
    comparison_service: ComparisonService = Depends(get_comparison_service),
) -> ComparisonResponse:
    """
    Compare a baseline month (period 1) against a current month (period 2).
    """

    try:
        period1 = ImportPeriod(year=month1_year, month=month1_month)
        period2 = ImportPeriod(year=month2_year, month=month2_month)
    except InvalidPeriodError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    result = comparison_service.get_comparison(db=db, period1=period1, period2=period2)
    return ComparisonResponse.model_validate(result)
