"""CLI entry point for the price estimator.

Usage:
    python -m src.pricing.estimator.main --size 30 --year 2018 --hardware Gold
    python -m src.pricing.estimator.main --size 25 --exotic --exotic-type Crocodile --model ratio
    python -m src.pricing.estimator.main --size 35 --leather Togo --color Etoupe \\
        --source json --data data/sales.json --output data/exports/estimate.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from src.common.logging import configure_cli_logging
from src.common.models import BagAttributes, InsufficientData

from ..common.config import Config
from ..repository.factory import SOURCES, open_repository
from .service import PricingService
from .strategies import MODEL_REGISTRY

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Birkin Price Index — Estimate")
    parser.add_argument("--size", type=int, required=True, help="Bag size in cm (e.g., 30)")
    parser.add_argument("--year", type=int, help="Production year")
    parser.add_argument("--hardware", type=str, help="Hardware finish (e.g., 'Gold', 'PHW')")
    parser.add_argument("--color", type=str, help="Color name (e.g., 'Etoupe')")
    parser.add_argument("--leather", type=str, help="Leather type for standard bags (e.g., 'Togo')")
    parser.add_argument("--exotic", action="store_true", help="Exotic skin bag")
    parser.add_argument("--exotic-type", type=str, help="Exotic skin (e.g., 'Crocodile')")
    parser.add_argument(
        "--model",
        type=str,
        choices=sorted(MODEL_REGISTRY),
        help="Pricing model (default from config/settings.yaml)",
    )
    parser.add_argument("--source", type=str, choices=SOURCES, default="supabase", help="Sales source")
    parser.add_argument("--data", type=str, help="JSON fixture or SQLite file for --source json/sqlite")
    parser.add_argument("--output", type=str, help="Output JSON file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_cli_logging(args.verbose)

    bag = BagAttributes(
        size=args.size,
        is_exotic=args.exotic or bool(args.exotic_type),
        exotic_type=args.exotic_type,
        leather_type=args.leather,
        year=args.year,
        hardware=args.hardware,
        color=args.color,
    )

    config = Config()
    repository = open_repository(args.source, config, args.data)
    service = PricingService(repository, cache_ttl_seconds=config.factor_cache_ttl_seconds)
    result = service.estimate(bag, args.model)

    if isinstance(result, InsufficientData):
        logger.error("Cannot estimate: %s", result.reason)
        return 1

    logger.info("=== %s estimate: size %d %s ===", result.model, bag.size,
                "exotic" if bag.is_exotic else "standard")
    logger.info(
        "  $%s (range $%s – $%s), %s confidence (min n=%d)",
        f"{result.point_estimate:,.0f}",
        f"{result.low_bound:,.0f}",
        f"{result.high_bound:,.0f}",
        result.confidence.value,
        result.min_sample_size,
    )
    for name, factor in result.breakdown.items():
        logger.info("  %-9s %-14s %s (n=%s)", name, factor.category, f"{factor.value:,.3f}",
                    factor.sample_size)

    payload = result.model_dump(mode="json")
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info("Output written to %s", args.output)
    else:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
