"""
db/models/monthly_summary.py

Per-platform, per-month rollup consumed by every reporting view.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import BigInteger, Date, Float, Index, Integer, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

_NATURAL_KEY_CONSTRAINT = "uq_monthly_summaries_platform_month"


class MonthlySummary(Base, TimestampMixin):
    """
    Rollup of one platform's imported metrics for one calendar month.

    ``month`` is always the first day of the month. Counter totals that
    sum to zero are stored as NULL; ``avg_*`` fields are NULL when no
    value could be derived. The import rewrites the row wholesale rather
    than adding to it.
    """

    __tablename__ = "monthly_summaries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    platform: Mapped[str] = mapped_column(String(32), nullable=False)
    month: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First calendar day of the reporting month",
    )

    total_spend: Mapped[float] = mapped_column(Numeric(16, 4, asdecimal=False), nullable=False)
    total_impressions: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_clicks: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    total_video_views: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    total_purchases: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    total_revenue: Mapped[float | None] = mapped_column(
        Numeric(16, 4, asdecimal=False),
        nullable=True,
    )

    avg_ctr: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_cpm: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_cpc: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_roas: Mapped[float | None] = mapped_column(Float, nullable=True)

    campaign_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Accepted import rows for this platform/month, not distinct campaigns",
    )

    __table_args__ = (
        UniqueConstraint("platform", "month", name=_NATURAL_KEY_CONSTRAINT),
        Index("ix_monthly_summaries_month", "month"),
    )

    def __repr__(self) -> str:
        return f"<MonthlySummary platform={self.platform!r} month={self.month.isoformat()}>"
