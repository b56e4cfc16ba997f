"""
db/models/campaign.py

Campaign model: one campaign per platform per imported month.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.campaign_metric import CampaignMetric

_NATURAL_KEY_CONSTRAINT = "uq_campaigns_name_platform"


class Platform:
    """Closed set of advertising channel identifiers stored in ``platform`` columns."""

    META = "META"
    X = "X"
    TIKTOK = "TIKTOK"
    LINKEDIN = "LINKEDIN"
    TABOOLA = "TABOOLA"
    VIBE_CTV = "VIBE_CTV"
    WHOLESALE_CENTRAL = "WHOLESALE_CENTRAL"


ALL_PLATFORMS: tuple[str, ...] = (
    Platform.META,
    Platform.X,
    Platform.TIKTOK,
    Platform.LINKEDIN,
    Platform.TABOOLA,
    Platform.VIBE_CTV,
    Platform.WHOLESALE_CENTRAL,
)


class Campaign(Base, TimestampMixin):
    """
    Import-generated campaign.

    ``name`` is derived as ``"{platform} - {MonthName} {year}"`` so
    re-importing the same platform/month resolves to the same row.
    """

    __tablename__ = "campaigns"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    platform: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="META, X, TIKTOK, LINKEDIN, TABOOLA, VIBE_CTV, WHOLESALE_CENTRAL",
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Last calendar day of the campaign month",
    )

    metrics: Mapped[list["CampaignMetric"]] = relationship(
        "CampaignMetric",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("name", "platform", name=_NATURAL_KEY_CONSTRAINT),
        Index("ix_campaigns_platform", "platform"),
    )

    def __repr__(self) -> str:
        return f"<Campaign id={self.id} name={self.name!r} platform={self.platform!r}>"
