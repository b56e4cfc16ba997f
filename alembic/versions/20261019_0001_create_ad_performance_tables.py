"""create campaigns, campaign_metrics and monthly_summaries tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "platform",
            sa.String(length=32),
            nullable=False,
            comment="META, X, TIKTOK, LINKEDIN, TABOOLA, VIBE_CTV, WHOLESALE_CENTRAL",
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False, comment="Last calendar day of the campaign month"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "platform", name="uq_campaigns_name_platform"),
    )
    op.create_index("ix_campaigns_platform", "campaigns", ["platform"], unique=False)

    op.create_table(
        "campaign_metrics",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column(
            "region",
            sa.String(length=64),
            nullable=False,
            comment="Flat-file imports always write the ALL sentinel",
        ),
        sa.Column("impressions", sa.BigInteger(), nullable=False),
        sa.Column("clicks", sa.BigInteger(), nullable=True),
        sa.Column("spend", sa.Numeric(14, 4), nullable=False),
        sa.Column("ctr", sa.Float(), nullable=True),
        sa.Column("cpm", sa.Numeric(14, 4), nullable=True),
        sa.Column("cpc", sa.Numeric(14, 4), nullable=True),
        sa.Column("video_views", sa.BigInteger(), nullable=True),
        sa.Column("video_view_rate", sa.Float(), nullable=True),
        sa.Column("purchases", sa.BigInteger(), nullable=True),
        sa.Column("purchase_value", sa.Numeric(14, 4), nullable=True),
        sa.Column("roas", sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["campaign_id"], ["campaigns.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "campaign_id",
            "report_date",
            "region",
            name="uq_campaign_metrics_campaign_date_region",
        ),
    )
    op.create_index("ix_campaign_metrics_report_date", "campaign_metrics", ["report_date"], unique=False)

    op.create_table(
        "monthly_summaries",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("platform", sa.String(length=32), nullable=False),
        sa.Column("month", sa.Date(), nullable=False, comment="First calendar day of the reporting month"),
        sa.Column("total_spend", sa.Numeric(16, 4), nullable=False),
        sa.Column("total_impressions", sa.BigInteger(), nullable=False),
        sa.Column("total_clicks", sa.BigInteger(), nullable=True),
        sa.Column("total_video_views", sa.BigInteger(), nullable=True),
        sa.Column("total_purchases", sa.BigInteger(), nullable=True),
        sa.Column("total_revenue", sa.Numeric(16, 4), nullable=True),
        sa.Column("avg_ctr", sa.Float(), nullable=True),
        sa.Column("avg_cpm", sa.Float(), nullable=True),
        sa.Column("avg_cpc", sa.Float(), nullable=True),
        sa.Column("avg_roas", sa.Float(), nullable=True),
        sa.Column(
            "campaign_count",
            sa.Integer(),
            nullable=False,
            comment="Accepted import rows for this platform/month, not distinct campaigns",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("platform", "month", name="uq_monthly_summaries_platform_month"),
    )
    op.create_index("ix_monthly_summaries_month", "monthly_summaries", ["month"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_monthly_summaries_month", table_name="monthly_summaries")
    op.drop_table("monthly_summaries")
    op.drop_index("ix_campaign_metrics_report_date", table_name="campaign_metrics")
    op.drop_table("campaign_metrics")
    op.drop_index("ix_campaigns_platform", table_name="campaigns")
    op.drop_table("campaigns")
