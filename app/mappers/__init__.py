"""
app/mappers package marker.
"""

from app.mappers.aliases import COLUMN_ALIASES, PLATFORM_ALIASES, resolve_platform
from app.mappers.row_normalizer import RowNormalizer, parse_number

__all__ = [
    "COLUMN_ALIASES",
    "PLATFORM_ALIASES",
    "RowNormalizer",
    "parse_number",
    "resolve_platform",
]
