"""CLI entry point for the market guide and factor tables.

Usage:
    python -m src.pricing.segments.main
    python -m src.pricing.segments.main --tables --output data/exports/factors.json
    python -m src.pricing.segments.main --source json --data data/sales.json
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
    parser = argparse.ArgumentParser(description="Birkin Price Index — Market Guide")
    parser.add_argument("--source", type=str, choices=SOURCES, default="supabase", help="Sales source")
    parser.add_argument("--data", type=str, help="JSON fixture or SQLite file for --source json/sqlite")
    parser.add_argument(
        "--tables",
        action="store_true",
        help="Dump the raw factor tables instead of the guide summaries",
    )
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    configure_cli_logging(args.verbose)

    config = Config()
    service = PricingService(open_repository(args.source, config, args.data))

    guide = service.market_guide()
    if isinstance(guide, InsufficientData):
        logger.error("Cannot build market guide: %s", guide.reason)
        return 1

    if args.tables:
        payload = service.snapshot().tables.to_dict()
    else:
        logger.info(
            "=== Market guide: standard mean $%s, exotic mean $%s (%+d%%) ===",
            f"{guide.standard_mean:,.0f}", f"{guide.exotic_mean:,.0f}", guide.exotic_premium_pct,
        )
        for row in guide.sizes:
            logger.info("  Size %-4s median $%s (n=%d)", row.category, f"{row.median:,.0f}", row.count)
        payload = guide.model_dump(mode="json")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
