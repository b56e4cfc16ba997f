"""
app/repositories/ad_metrics_repository.py

Keyed record store for the import pipeline: Campaign, CampaignMetric and
MonthlySummary, each looked up by its natural key.

Writes are flushed so later lookups in the same transaction see them, but
this repository never commits; the caller owns commit/rollback.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.campaign import Campaign
from db.models.campaign_metric import CampaignMetric
from db.models.monthly_summary import MonthlySummary


class AdMetricsRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Campaign
    # ------------------------------------------------------------------

    def find_campaign(self, *, name: str, platform: str) -> Campaign | None:
        stmt = select(Campaign).where(Campaign.name == name, Campaign.platform == platform)
        return self._session.scalars(stmt).first()

    def create_campaign(
        self,
        *,
        name: str,
        platform: str,
        start_date: date,
        end_date: date,
    ) -> Campaign:
        campaign = Campaign(
            name=name,
            platform=platform,
            start_date=start_date,
            end_date=end_date,
        )
        self._session.add(campaign)
        self._session.flush()
        return campaign

    # ------------------------------------------------------------------
    # CampaignMetric
    # ------------------------------------------------------------------

    def find_campaign_metric(
        self,
        *,
        campaign_id: uuid.UUID,
        report_date: date,
        region: str,
    ) -> CampaignMetric | None:
        stmt = select(CampaignMetric).where(
            CampaignMetric.campaign_id == campaign_id,
            CampaignMetric.report_date == report_date,
            CampaignMetric.region == region,
        )
        return self._session.scalars(stmt).first()

    def create_campaign_metric(
        self,
        *,
        campaign_id: uuid.UUID,
        report_date: date,
        region: str,
        values: Mapping[str, Any],
    ) -> CampaignMetric:
        metric = CampaignMetric(
            campaign_id=campaign_id,
            report_date=report_date,
            region=region,
            **values,
        )
        self._session.add(metric)
        self._session.flush()
        return metric

    def update_campaign_metric(
        self,
        metric: CampaignMetric,
        values: Mapping[str, Any],
    ) -> CampaignMetric:
        for column, value in values.items():
            setattr(metric, column, value)
        self._session.flush()
        return metric

    def list_campaign_metrics_for_month(
        self,
        *,
        platform: str,
        month_start: date,
        month_end: date,
    ) -> list[CampaignMetric]:
        """
        All metric rows of a platform's campaigns reported within a month.
        """

        stmt = (
            select(CampaignMetric)
            .join(Campaign, Campaign.id == CampaignMetric.campaign_id)
            .where(
                Campaign.platform == platform,
                CampaignMetric.report_date >= month_start,
                CampaignMetric.report_date <= month_end,
            )
            .order_by(CampaignMetric.report_date, CampaignMetric.created_at)
        )
        return list(self._session.scalars(stmt).all())

    # ------------------------------------------------------------------
    # MonthlySummary
    # ------------------------------------------------------------------

    def find_monthly_summary(self, *, platform: str, month: date) -> MonthlySummary | None:
        stmt = select(MonthlySummary).where(
            MonthlySummary.platform == platform,
            MonthlySummary.month == month,
        )
        return self._session.scalars(stmt).first()

    def create_monthly_summary(
        self,
        *,
        platform: str,
        month: date,
        values: Mapping[str, Any],
    ) -> MonthlySummary:
        summary = MonthlySummary(platform=platform, month=month, **values)
        self._session.add(summary)
        self._session.flush()
        return summary

    def update_monthly_summary(
        self,
        summary: MonthlySummary,
        values: Mapping[str, Any],
    ) -> MonthlySummary:
        for column, value in values.items():
            setattr(summary, column, value)
        self._session.flush()
        return summary
