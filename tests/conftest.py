"""
tests/conftest.py

Shared fixtures: an in-memory SQLite database with the full ORM schema,
one session per test, and sample export files.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.services.ad_import_service import AdImportService
from db.base import Base
from db.models import MonthlySummary

LITTO_APRIL_CSV = "\n".join(
    [
        "LITTO - April '25",
        "",
        "Platform,Impressions,Link Clicks,CTR %,CPC (cost per click),CPM (cost per 1000 views),Cost",
        "Meta Ads,85452,3428,5.38%,-,-,$618.92",
        "Tik Tok Ads,120000,1500,1.25%,$0.40,$5.00,$600.00",
        "Unknown Network,1000,10,1.00%,-,-,$10.00",
        "Taboola,-,100,-,-,-,$50.00",
        "TOTAL,205452,4928,,,,$1218.92",
        "Notes,these lines are ignored",
    ]
)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def import_service() -> AdImportService:
    """Service with a pinned clock so the default-period branch is deterministic."""
    return AdImportService(today=lambda: date(2025, 6, 15))


@pytest.fixture()
def litto_april_csv() -> str:
    return LITTO_APRIL_CSV


def _insert_summary(
    db: Session,
    platform: str,
    year: int,
    month: int,
    *,
    total_spend: float,
    total_impressions: int,
    **values: object,
) -> None:
    """Insert one MonthlySummary row directly, bypassing the import pipeline."""
    values.setdefault("campaign_count", 1)
    db.add(
        MonthlySummary(
            platform=platform,
            month=date(year, month, 1),
            total_spend=total_spend,
            total_impressions=total_impressions,
            **values,
        )
    )
    db.commit()


@pytest.fixture()
def add_summary() -> Callable[..., None]:
    return _insert_summary
