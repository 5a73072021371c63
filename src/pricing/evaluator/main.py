"""CLI entry point for the model evaluator.

Usage:
    python -m src.pricing.evaluator.main
    python -m src.pricing.evaluator.main --source json --data data/sales.json
    python -m src.pricing.evaluator.main --output data/exports/model_comparison.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from src.common.logging import configure_cli_logging
from src.common.models import InsufficientData

from ..common.config import Config
from ..estimator.service import PricingService
from ..repository.factory import SOURCES, open_repository

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Birkin Price Index — Model Comparison")
    parser.add_argument("--source", type=str, choices=SOURCES, default="supabase", help="Sales source")
    parser.add_argument("--data", type=str, help="JSON fixture or SQLite file for --source json/sqlite")
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)

    config = Config()
    service = PricingService(open_repository(args.source, config, args.data))
    report = service.compare_models()

    if isinstance(report, InsufficientData):
        logger.error("Cannot compare models: %s", report.reason)
        return 1

    logger.info(
        "=== Model comparison: %d sales (%d standard / %d exotic), baseline $%s ===",
        report.total_sales, report.standard_sales, report.exotic_sales,
        f"{report.baseline:,.0f}",
    )
    for rank, name in enumerate(report.ranking, start=1):
        m = report.overall[name]
        logger.info("  %d. %-8s R²=%.3f  MAE=$%s  MAPE=%.1f%%", rank, name, m.r2,
                    f"{m.mae:,.0f}", m.mape)
    logger.info("Winner: %s", report.winner)

    payload = report.model_dump(mode="json")
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
