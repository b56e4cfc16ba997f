"""
db/models/campaign_metric.py

Per-campaign, per-day (per-region) metric record written by the CSV import.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Date,
    Float,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.campaign import Campaign

_NATURAL_KEY_CONSTRAINT = "uq_campaign_metrics_campaign_date_region"

REGION_ALL = "ALL"


class CampaignMetric(Base, TimestampMixin):
    """
    One metric row per ``(campaign_id, report_date, region)``.

    Rates (``ctr``, ``video_view_rate``, ``roas``) are stored as plain
    fractions, never as pre-multiplied percentages.
    """

    __tablename__ = "campaign_metrics"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    report_date: Mapped[date] = mapped_column(Date, nullable=False)
    region: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default=REGION_ALL,
        comment="Flat-file imports always write the ALL sentinel",
    )

    impressions: Mapped[int] = mapped_column(BigInteger, nullable=False)
    clicks: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    spend: Mapped[float] = mapped_column(
        Numeric(14, 4, asdecimal=False),
        nullable=False,
        default=0,
    )
    ctr: Mapped[float | None] = mapped_column(Float, nullable=True)
    cpm: Mapped[float | None] = mapped_column(Numeric(14, 4, asdecimal=False), nullable=True)
    cpc: Mapped[float | None] = mapped_column(Numeric(14, 4, asdecimal=False), nullable=True)
    video_views: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    video_view_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    purchases: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    purchase_value: Mapped[float | None] = mapped_column(
        Numeric(14, 4, asdecimal=False),
        nullable=True,
    )
    roas: Mapped[float | None] = mapped_column(Float, nullable=True)

    campaign: Mapped["Campaign"] = relationship("Campaign", back_populates="metrics")

    __table_args__ = (
        UniqueConstraint(
            "campaign_id",
            "report_date",
            "region",
            name=_NATURAL_KEY_CONSTRAINT,
        ),
        Index("ix_campaign_metrics_report_date", "report_date"),
    )
