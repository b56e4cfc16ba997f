"""
app/mappers/aliases.py

Closed, versioned lookup tables for the export dialects the importer
accepts. Extend these when a platform ships a new header spelling; no
other module hard-codes labels.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from db.models.campaign import Platform

PLATFORM_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "Meta Ads": Platform.META,
        "Meta": Platform.META,
        "X Ads": Platform.X,
        "X": Platform.X,
        "Tik Tok Ads": Platform.TIKTOK,
        "TikTok Ads": Platform.TIKTOK,
        "TikTok": Platform.TIKTOK,
        "LinkedIn Ads": Platform.LINKEDIN,
        "LinkedIn": Platform.LINKEDIN,
        "Taboola": Platform.TABOOLA,
        "Vibe": Platform.VIBE_CTV,
        "Vibe CTV": Platform.VIBE_CTV,
        "Wholesale Central": Platform.WHOLESALE_CENTRAL,
    }
)

PLATFORM_COLUMN = "Platform"
IMPRESSIONS_COLUMN = "Impressions"

# Header spellings per canonical metric, tried left to right; the first
# non-empty cell wins.
COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "impressions": (IMPRESSIONS_COLUMN,),
        "clicks": ("Link Clicks", "Clicks"),
        "spend": ("Cost", "Spend"),
        "ctr": ("CTR %", "CTR"),
        "cpc": ("CPC (cost per click)", "CPC"),
        "cpm": ("CPM (cost per 1000 views)", "CPM"),
        "video_views": ("Video Views",),
        "video_view_rate": ("Video View Rate",),
        "purchases": ("Purchases",),
        "purchase_value": ("Purchase Value",),
        "roas": ("ROAS %", "ROAS"),
    }
)


def resolve_platform(label: str | None) -> str | None:
    """
    Map a human platform label to its identifier, or None when unknown.
    """

    if not label:
        return None
    return PLATFORM_ALIASES.get(label.strip())
