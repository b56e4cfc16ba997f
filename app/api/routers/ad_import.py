"""
app/api/routers/ad_import.py

Ad-performance CSV import endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload, read_csv_text
from app.domain.ad_metrics import InvalidPeriodError
from app.parsers import HeaderNotFoundError
from app.schemas.ad_import import AdImportResponse, ReportPeriodsResponse
from app.services.ad_import_service import (
    AdImportPersistenceError,
    AdImportService,
    NoValidRowsError,
    get_ad_import_service,
)
from db.session import get_db

router = APIRouter(tags=["ad-import"])


@router.post("/import", response_model=AdImportResponse)
def import_ad_csv(
    file: UploadFile = Depends(get_csv_upload),
    year: int | None = Form(default=None, ge=2000, le=2100),
    month: int | None = Form(default=None, ge=1, le=12),
    db: Session = Depends(get_db),
    import_service: AdImportService = Depends(get_ad_import_service),
) -> AdImportResponse:
    """
    Import one platform export for a single month.

    The period comes from the form fields when both are given, otherwise
    from the file title, the filename, or the current date.
    """

    try:
        content = read_csv_text(file)
        result = import_service.import_csv(
            db=db,
            file_content=content,
            file_name=file.filename or "upload.csv",
            year=year,
            month=month,
        )
    except (HeaderNotFoundError, NoValidRowsError, InvalidPeriodError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AdImportPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import CSV",
        ) from exc
    finally:
        file.file.close()

    return AdImportResponse.from_result(result)


@router.get("/periods", response_model=ReportPeriodsResponse)
def list_report_periods(
    db: Session = Depends(get_db),
    import_service: AdImportService = Depends(get_ad_import_service),
) -> ReportPeriodsResponse:
    """
    List every month that has imported summaries, newest first.
    """

    data = import_service.get_report_periods(db=db)
    return ReportPeriodsResponse.model_validate(data)
