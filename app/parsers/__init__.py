"""
app/parsers package marker.
"""

from app.parsers.csv_parser import HeaderNotFoundError, parse_csv, split_csv_line
from app.parsers.period_resolver import resolve_period

__all__ = [
    "HeaderNotFoundError",
    "parse_csv",
    "resolve_period",
    "split_csv_line",
]
