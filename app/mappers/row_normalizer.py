"""
app/mappers/row_normalizer.py

Maps one parsed export row to a CanonicalMetric.

Numeric cells
-------------
Currency symbols, percent signs, quotes, whitespace and thousands
separators are stripped before parsing. An empty cell, ``"-"`` or the
literal ``"0"`` is *absent* (None), not zero: absent rates are left out of
the per-platform averages downstream.

Derived metrics (only when the explicit column is absent)
---------------------------------------------------------
CPM  = spend / impressions * 1000
CPC  = spend / clicks                      (clicks > 0)
CTR  = explicit % / 100, else clicks / impressions
ROAS = explicit % / 100, else purchase_value / spend   (spend > 0)
Video view rate has no derived form; explicit % / 100 only.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Mapping, Sequence

from app.domain.ad_metrics import CanonicalMetric, RawRow, SkippedRow, SkipReason
from app.mappers.aliases import COLUMN_ALIASES, PLATFORM_COLUMN, resolve_platform

logger = logging.getLogger(__name__)

_ABSENT_TOKENS = frozenset({"", "-", "0"})
_STRIP_CHARS = re.compile(r"[$€£%\s\",]")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Largest value a BIGINT counter column can hold.
_MAX_COUNT = 2**63 - 1


def parse_number(value: str | None) -> float | None:
    """
    Parse a spreadsheet cell into a float, or None when absent/unparseable.

    Like a lenient ``parseFloat``, trailing junk after the leading number
    is ignored (``"12.5x"`` -> 12.5).

    Overflowing values such as ``1e400`` are treated as absent.
    """

    if value is None:
        return None
    raw = value.strip()
    if raw in _ABSENT_TOKENS:
        return None
    match = _LEADING_NUMBER.match(_STRIP_CHARS.sub("", raw))
    if match is None:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def _to_count(value: float | None) -> int | None:
    if value is None:
        return None
    count = int(round(value))
    return count if abs(count) <= _MAX_COUNT else None


def _percent_to_ratio(value: float | None) -> float | None:
    return None if value is None else value / 100


class RowNormalizer:
    """
    Per-file normalizer.

    The header list is resolved against ``COLUMN_ALIASES`` once, at
    construction; each row then only looks at the headers the file
    actually has, in alias priority order.
    """

    def __init__(
        self,
        headers: Sequence[str],
        *,
        aliases: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        present = set(headers)
        self._columns: dict[str, tuple[str, ...]] = {
            field: tuple(alias for alias in candidates if alias in present)
            for field, candidates in (aliases or COLUMN_ALIASES).items()
        }

    def normalize(self, row: RawRow) -> tuple[CanonicalMetric | None, SkippedRow | None]:
        """
        Return ``(metric, None)`` for an accepted row or ``(None, skip)``.
        """

        label = row.get(PLATFORM_COLUMN)
        platform = resolve_platform(label)
        if platform is None:
            return None, SkippedRow(
                line_number=row.line_number,
                reason=SkipReason.UNKNOWN_PLATFORM,
                platform_label=label or None,
            )

        impressions = _to_count(self._number(row, "impressions"))
        if not impressions or impressions <= 0:
            return None, SkippedRow(
                line_number=row.line_number,
                reason=SkipReason.MISSING_IMPRESSIONS,
                platform_label=label,
            )

        spend = self._number(row, "spend") or 0.0
        clicks = _to_count(self._number(row, "clicks"))
        purchase_value = self._number(row, "purchase_value")

        explicit_cpm = self._number(row, "cpm")
        explicit_cpc = self._number(row, "cpc")
        explicit_ctr = self._number(row, "ctr")
        explicit_roas = self._number(row, "roas")

        cpm = explicit_cpm if explicit_cpm is not None else spend * 1000 / impressions

        if explicit_cpc is not None:
            cpc: float | None = explicit_cpc
        elif clicks:
            cpc = spend / clicks
        else:
            cpc = None

        if explicit_ctr is not None:
            ctr: float | None = explicit_ctr / 100
        elif clicks:
            ctr = clicks / impressions
        else:
            ctr = None

        if explicit_roas is not None:
            roas: float | None = explicit_roas / 100
        elif purchase_value and spend > 0:
            roas = purchase_value / spend
        else:
            roas = None

        return (
            CanonicalMetric(
                platform=platform,
                impressions=impressions,
                spend=spend,
                clicks=clicks,
                ctr=ctr,
                cpm=cpm,
                cpc=cpc,
                video_views=_to_count(self._number(row, "video_views")),
                video_view_rate=_percent_to_ratio(self._number(row, "video_view_rate")),
                purchases=_to_count(self._number(row, "purchases")),
                purchase_value=purchase_value,
                roas=roas,
            ),
            None,
        )

    def _number(self, row: RawRow, field: str) -> float | None:
        for header in self._columns.get(field, ()):
            cell = row.get(header)
            if cell:
                return parse_number(cell)
        return None
