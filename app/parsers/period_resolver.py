"""
app/parsers/period_resolver.py

Recovers the reporting month of an export from weak textual signals.

Priority:
    1. explicit caller override (both year and month)
    2. month name on the first line of the content, with a 2-4 digit year
       (optionally apostrophe-prefixed, ``'25`` -> 2025) on the same line
    3. month name in the filename, with a 4-digit year from the filename
    4. the current year and month
"""

from __future__ import annotations

import logging
import re
from datetime import date
from types import MappingProxyType
from typing import Callable, Mapping

from app.domain.ad_metrics import ImportPeriod, PeriodSource, ResolvedPeriod

logger = logging.getLogger(__name__)

# Full names are scanned before abbreviations.
MONTH_NAMES: Mapping[str, int] = MappingProxyType(
    {
        "january": 1,
        "february": 2,
        "march": 3,
        "april": 4,
        "may": 5,
        "june": 6,
        "july": 7,
        "august": 8,
        "september": 9,
        "october": 10,
        "november": 11,
        "december": 12,
        "jan": 1,
        "feb": 2,
        "mar": 3,
        "apr": 4,
        "jun": 6,
        "jul": 7,
        "aug": 8,
        "sep": 9,
        "sept": 9,
        "oct": 10,
        "nov": 11,
        "dec": 12,
    }
)

_CONTENT_YEAR = re.compile(r"'?(\d{2,4})")
_FILENAME_YEAR = re.compile(r"(\d{4})")
_LINE_BREAK = re.compile(r"\r?\n")


def _find_month(text: str) -> int | None:
    lowered = text.lower()
    for name, number in MONTH_NAMES.items():
        if name in lowered:
            return number
    return None


def resolve_period(
    content: str,
    filename: str,
    *,
    year: int | None = None,
    month: int | None = None,
    today: Callable[[], date] = date.today,
) -> ResolvedPeriod:
    """
    Resolve the reporting period for one import. Never fails.

    ``today`` is injectable so the fallback branches are testable.
    """

    if year and month:
        return ResolvedPeriod(ImportPeriod(year=year, month=month), PeriodSource.OVERRIDE)

    first_line = _LINE_BREAK.split(content.lstrip("\ufeff"), maxsplit=1)[0]
    month_number = _find_month(first_line)
    if month_number is not None:
        match = _CONTENT_YEAR.search(first_line)
        resolved_year = int(match.group(1)) if match else today().year
        if resolved_year < 100:
            resolved_year += 2000
        logger.info(
            "Import period taken from content first_line=%r year=%d month=%d",
            first_line,
            resolved_year,
            month_number,
        )
        return ResolvedPeriod(
            ImportPeriod(year=resolved_year, month=month_number),
            PeriodSource.CONTENT,
        )

    month_number = _find_month(filename)
    if month_number is not None:
        match = _FILENAME_YEAR.search(filename)
        resolved_year = int(match.group(1)) if match else today().year
        logger.info(
            "Import period taken from filename filename=%r year=%d month=%d",
            filename,
            resolved_year,
            month_number,
        )
        return ResolvedPeriod(
            ImportPeriod(year=resolved_year, month=month_number),
            PeriodSource.FILENAME,
        )

    current = today()
    logger.info(
        "Import period not found in content or filename=%r; using current month %d-%02d",
        filename,
        current.year,
        current.month,
    )
    return ResolvedPeriod(ImportPeriod.from_date(current), PeriodSource.DEFAULT)
