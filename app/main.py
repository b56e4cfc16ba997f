"""
app/main.py

FastAPI application factory for the ad-performance reporting API.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import configure_logging

logger = logging.getLogger(__name__)


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.
    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logger.critical(
            "Schema mismatch: %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot."""
    if application.state.check_database:
        _check_db()
        logger.info("Database connectivity confirmed")
        _check_schema()
        logger.info("Database schema validated")
    yield


def _startup_checks_enabled() -> bool:
    value = os.getenv("STARTUP_DB_CHECK", "true").strip().lower()
    return value in {"1", "true", "yes", "on"}


def create_app(*, check_database: bool | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    configure_logging()

    application = FastAPI(
        title="Ad Performance Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.state.check_database = (
        _startup_checks_enabled() if check_database is None else check_database
    )

    from app.api.routers import (
        ad_import_router,
        comparison_router,
        monthly_summary_router,
    )

    application.include_router(ad_import_router)
    application.include_router(monthly_summary_router)
    application.include_router(comparison_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
