"""
Run the sales analysis pipeline on a local file from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.domain.errors import InvalidDatasetError, SalesAnalysisError
from app.mappers.sales_report_mapper import to_sales_analysis_response
from app.services.sales_analysis_service import SalesAnalysisService
from app.validators.sales_dataset_validator import render_validation_report


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze a food-truck sales export.")
    parser.add_argument("path", type=Path, help="CSV, TSV or plain-text sales file.")
    parser.add_argument(
        "--weather",
        action="store_true",
        help="Correlate revenue with daily weather observations.",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print the plain-text validation report instead of JSON.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Root logging level.")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = SalesAnalysisService()
    try:
        report = service.analyze_upload(args.path.read_bytes(), include_weather=args.weather)
    except InvalidDatasetError as exc:
        if args.report:
            print(render_validation_report(exc.validation))
        else:
            print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2
    except SalesAnalysisError as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Cannot read {args.path}: {exc}", file=sys.stderr)
        return 1

    if args.report:
        print(render_validation_report(report.validation))
    else:
        print(to_sales_analysis_response(report).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
