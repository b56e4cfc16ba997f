"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.campaign import ALL_PLATFORMS, Campaign, Platform
from db.models.campaign_metric import REGION_ALL, CampaignMetric
from db.models.monthly_summary import MonthlySummary

__all__ = [
    "ALL_PLATFORMS",
    "Campaign",
    "CampaignMetric",
    "MonthlySummary",
    "Platform",
    "REGION_ALL",
]
