"""
app/parsers/csv_parser.py

Header-locating, quote-aware parser for ad-platform export sheets.

Exports are human-authored spreadsheets saved as CSV: a title line or two,
then a header row, data rows, and usually a ``TOTAL`` footer. Parsing rules:

    * blank lines are dropped before anything else happens
    * the header is the first line containing both ``Platform`` and
      ``Impressions``; without it the file is unusable
    * data ends at a line starting with ``TOTAL`` or with a comma
      (an empty first cell separates sections in these sheets)
    * double quotes toggle "inside field" mode; escaped quotes inside a
      quoted field are not supported
    * rows whose Platform label is not in the alias table are dropped
"""

from __future__ import annotations

import logging
import re

from app.domain.ad_metrics import ParsedCSV, RawRow, SkippedRow, SkipReason
from app.mappers.aliases import IMPRESSIONS_COLUMN, PLATFORM_COLUMN, resolve_platform

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
_SECTION_END_PREFIXES = ("TOTAL", ",")


class HeaderNotFoundError(ValueError):
    """
    Raised when no line carries both the Platform and Impressions headers.
    """


def split_csv_line(line: str) -> list[str]:
    """
    Split one line on commas that are not inside double quotes.

    Quote characters are consumed, not kept; every field is trimmed.
    """

    values: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())
    return values


def _is_header_line(line: str) -> bool:
    return PLATFORM_COLUMN in line and IMPRESSIONS_COLUMN in line


def parse_csv(content: str) -> ParsedCSV:
    """
    Parse raw export text into header-keyed rows.

    Line numbers on the returned rows are 1-based positions in the
    original text, blank lines included, so they match what an operator
    sees in a spreadsheet.

    Raises:
        HeaderNotFoundError: the file has no recognizable header row.
    """

    numbered_lines = [
        (index, line)
        for index, line in enumerate(_LINE_BREAK.split(content.lstrip("\ufeff")), start=1)
        if line.strip()
    ]

    header_position = next(
        (position for position, (_, line) in enumerate(numbered_lines) if _is_header_line(line)),
        None,
    )
    if header_position is None:
        raise HeaderNotFoundError(
            "Could not find header row with Platform and Impressions columns"
        )

    header_line_number, header_line = numbered_lines[header_position]
    headers = tuple(cell.strip() for cell in header_line.split(","))
    logger.debug("CSV header located line=%d headers=%s", header_line_number, list(headers))

    rows: list[RawRow] = []
    skipped: list[SkippedRow] = []

    for line_number, line in numbered_lines[header_position + 1:]:
        if line.startswith(_SECTION_END_PREFIXES):
            break

        values = split_csv_line(line)
        cells = {
            header: values[index] if index < len(values) else ""
            for index, header in enumerate(headers)
            if header
        }
        label = cells.get(PLATFORM_COLUMN, "")
        if resolve_platform(label) is None:
            skipped.append(
                SkippedRow(
                    line_number=line_number,
                    reason=SkipReason.UNKNOWN_PLATFORM,
                    platform_label=label or None,
                )
            )
            continue

        rows.append(RawRow(line_number=line_number, cells=cells))

    logger.debug(
        "CSV parsed rows=%d skipped_unknown_platform=%d", len(rows), len(skipped)
    )
    return ParsedCSV(headers=headers, rows=rows, skipped=skipped)
