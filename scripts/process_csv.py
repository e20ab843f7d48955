"""
Process a local analytics CSV export from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from app.schemas.metrics import MetricsRecordPayload
from app.services.csv_processing_service import (
    CSVUploadError,
    build_missing_ids_csv,
    get_csv_processing_service,
)
from app.services.funnel_service import get_funnel_service, unique_completion_rate
from app.validators.mapping_validator import SchemaError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Aggregate campaign metrics from an analytics CSV export.")
    parser.add_argument("path", type=Path, help="CSV file to process.")
    parser.add_argument(
        "--missing-ids-out",
        dest="missing_ids_out",
        type=Path,
        default=None,
        help="Optional path to write the missing-ID CSV to.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log processing details to stderr.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = get_csv_processing_service()
    try:
        result = service.process_bytes(args.path.read_bytes(), args.path.name)
    except (SchemaError, CSVUploadError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.missing_ids_out is not None and result.metrics.missing_ids:
        args.missing_ids_out.write_text(
            build_missing_ids_csv(result.metrics.missing_ids),
            encoding="utf-8",
        )

    catalogue = get_funnel_service().build_metric_catalogue(result.metrics)
    payload = {
        "file_name": result.file_name,
        "metadata": asdict(result.metadata),
        "metrics": MetricsRecordPayload.from_domain(result.metrics).model_dump(),
        "unique_completion_rate": unique_completion_rate(result.metrics),
        "funnel_options": [asdict(option) for option in catalogue],
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
