"""
Import one ad-performance CSV export from the command line.

    python -m scripts.import_ad_csv exports/litto_april_25.csv --year 2025 --month 4
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from app.config import SummaryPolicy, configure_logging, get_ad_import_settings
from app.domain.ad_metrics import AdImportResult, InvalidPeriodError
from app.parsers import HeaderNotFoundError
from app.services.ad_import_service import AdImportError, AdImportService
from db.session import session_scope

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import an ad-performance CSV export.")
    parser.add_argument("file", type=Path, help="Path to the CSV export.")
    parser.add_argument("--year", type=int, default=None, help="Reporting year override.")
    parser.add_argument("--month", type=int, default=None, help="Reporting month override (1-12).")
    parser.add_argument(
        "--summary-policy",
        dest="summary_policy",
        choices=(SummaryPolicy.REPLACE, SummaryPolicy.RECOMPUTE),
        default=None,
        help="Override AD_IMPORT_SUMMARY_POLICY for this run.",
    )
    return parser


def result_payload(result: AdImportResult) -> dict[str, object]:
    return {
        "period": {
            "year": result.period.year,
            "month": result.period.month,
            "month_name": result.period.month_name,
            "source": result.period_source,
        },
        "records": {
            "created": result.created,
            "updated": result.updated,
            "total": result.total,
        },
        "summaries": {
            "platforms": result.summary_platforms,
            "count": len(result.summary_platforms),
        },
        "skipped": {
            "count": result.skipped_count,
            "by_reason": result.skipped_by_reason,
        },
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        content = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Unable to read {args.file}: {exc}", file=sys.stderr)
        return 1

    settings = get_ad_import_settings()
    service = AdImportService(
        summary_policy=args.summary_policy or settings.summary_policy,
        max_skip_details=settings.max_skip_details,
        log_skipped_rows=settings.log_skipped_rows,
        region=settings.region_sentinel,
    )

    try:
        with session_scope() as db:
            result = service.import_csv(
                db=db,
                file_content=content,
                file_name=args.file.name,
                year=args.year,
                month=args.month,
            )
    except (HeaderNotFoundError, InvalidPeriodError, AdImportError) as exc:
        logger.error("Import failed file=%r: %s", str(args.file), exc)
        print(str(exc), file=sys.stderr)
        return 1

    print(json.dumps(result_payload(result), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
