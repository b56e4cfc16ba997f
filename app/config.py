"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

logger = logging.getLogger(__name__)


class SummaryPolicy:
    """
    How an import writes the MonthlySummary of a platform/month it touched.

    REPLACE    overwrite with this batch's accumulated totals only
    RECOMPUTE  rebuild from every CampaignMetric stored for the month
    """

    REPLACE = "replace"
    RECOMPUTE = "recompute"


_ALLOWED_SUMMARY_POLICIES = frozenset({SummaryPolicy.REPLACE, SummaryPolicy.RECOMPUTE})


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def normalize_summary_policy(value: str | None) -> str:
    """
    Return a known summary policy; unknown values fall back to REPLACE.
    """

    candidate = (value or "").strip().lower()
    if candidate in _ALLOWED_SUMMARY_POLICIES:
        return candidate
    if candidate:
        logger.warning(
            "Unknown summary policy %r; falling back to %r",
            value,
            SummaryPolicy.REPLACE,
        )
    return SummaryPolicy.REPLACE


@dataclass(frozen=True)
class AdImportSettings:
    """
    Runtime settings for ad-performance CSV imports.
    """

    summary_policy: str = SummaryPolicy.REPLACE
    max_skip_details: int = 200
    log_skipped_rows: bool = True
    region_sentinel: str = "ALL"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@lru_cache(maxsize=1)
def get_ad_import_settings() -> AdImportSettings:
    """
    Return cached import settings from environment variables.
    """

    return AdImportSettings(
        summary_policy=normalize_summary_policy(
            _get_str_env("AD_IMPORT_SUMMARY_POLICY", SummaryPolicy.REPLACE)
        ),
        max_skip_details=max(0, _get_int_env("AD_IMPORT_MAX_SKIP_DETAILS", 200)),
        log_skipped_rows=_get_bool_env("AD_IMPORT_LOG_SKIPPED_ROWS", True),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())


def configure_logging() -> None:
    """
    Configure root logging once for the API process or a CLI run.
    """

    settings = get_logging_settings()
    logging.basicConfig(
        level=getattr(logging, settings.level, logging.INFO),
        format=settings.format,
    )
