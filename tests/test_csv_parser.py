"""
tests/test_csv_parser.py

Pytest unit tests for header location, tokenizing and section handling.
"""

from __future__ import annotations

import pytest

from app.domain.ad_metrics import SkipReason
from app.parsers import HeaderNotFoundError, parse_csv, split_csv_line


class TestSplitCsvLine:
    def test_splits_on_commas_and_trims(self) -> None:
        assert split_csv_line(" Meta Ads , 100 ,5%") == ["Meta Ads", "100", "5%"]

    def test_quoted_commas_stay_inside_field(self) -> None:
        assert split_csv_line('Meta Ads,"1,234","$1,000.50"') == [
            "Meta Ads",
            "1,234",
            "$1,000.50",
        ]

    def test_trailing_comma_yields_empty_field(self) -> None:
        assert split_csv_line("a,b,") == ["a", "b", ""]


class TestParseCsv:
    def test_header_found_after_title_and_blank_lines(self, litto_april_csv: str) -> None:
        parsed = parse_csv(litto_april_csv)

        assert parsed.headers[0] == "Platform"
        assert "Cost" in parsed.headers

    def test_rows_keep_original_line_numbers(self, litto_april_csv: str) -> None:
        parsed = parse_csv(litto_april_csv)

        assert [row.line_number for row in parsed.rows] == [4, 5, 7]
        assert parsed.rows[0].get("Platform") == "Meta Ads"
        assert parsed.rows[0].get("Cost") == "$618.92"

    def test_unknown_platform_rows_are_skipped_with_reason(self, litto_april_csv: str) -> None:
        parsed = parse_csv(litto_april_csv)

        assert len(parsed.skipped) == 1
        skip = parsed.skipped[0]
        assert skip.line_number == 6
        assert skip.reason == SkipReason.UNKNOWN_PLATFORM
        assert skip.platform_label == "Unknown Network"

    def test_total_line_ends_the_section(self) -> None:
        content = "Platform,Impressions\nMeta,100\nTOTAL,100\nX,50\n"
        parsed = parse_csv(content)

        assert [row.get("Platform") for row in parsed.rows] == ["Meta"]

    def test_leading_comma_line_ends_the_section(self) -> None:
        content = "Platform,Impressions\nMeta,100\n,\nX,50\n"
        parsed = parse_csv(content)

        assert len(parsed.rows) == 1

    def test_missing_cells_default_to_empty(self) -> None:
        parsed = parse_csv("Platform,Impressions,Cost\nMeta,100\n")

        assert parsed.rows[0].get("Cost") == ""

    def test_crlf_and_bom_are_tolerated(self) -> None:
        parsed = parse_csv("\ufeffPlatform,Impressions\r\nLinkedIn,42\r\n")

        assert parsed.rows[0].get("Platform") == "LinkedIn"
        assert parsed.rows[0].get("Impressions") == "42"

    def test_missing_header_raises(self) -> None:
        with pytest.raises(HeaderNotFoundError):
            parse_csv("Channel,Views\nMeta,100\n")

    def test_header_only_file_has_no_rows(self) -> None:
        parsed = parse_csv("Platform,Impressions\n")

        assert parsed.rows == []
        assert parsed.skipped == []

    def test_quoted_thousands_stay_in_one_cell(self) -> None:
        parsed = parse_csv('Platform,Impressions,Clicks\nMeta Ads,"1,234",56\n')

        row = parsed.rows[0]
        assert row.get("Impressions") == "1,234"
        assert row.get("Clicks") == "56"
