"""Model evaluator — compares the pricing models on historical sales.

Every registered model predicts every sale in the dataset from factor
tables built on that same dataset. Fit is reported overall and separately
for the standard and exotic populations, because the models differ most
in how they treat exotic premiums.

Ranking: highest overall R² wins; equal R² goes to the earlier model in
MODEL_PRECEDENCE (hybrid, then additive, then ratio).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from src.common.config import Settings, settings
from src.common.models import ModelComparisonReport, ModelMetrics, PredictionSample, SaleRecord

from ..common.stats import mean_absolute_error, mean_absolute_percentage_error, r_squared
from ..estimator.strategies import MODEL_PRECEDENCE, PricingModel, build_models
from ..segments.aggregator import build_factor_tables

logger = logging.getLogger(__name__)

# R² values closer than this are treated as a tie
R2_TIE_TOLERANCE = 1e-9
SAMPLE_PREDICTIONS = 10


def compute_metrics(actual: Sequence[float], predicted: Sequence[float]) -> ModelMetrics:
    """R², MAE and MAPE for one set of paired predictions."""
    return ModelMetrics(
        r2=r_squared(actual, predicted),
        mae=mean_absolute_error(actual, predicted),
        mape=mean_absolute_percentage_error(actual, predicted),
        sample_count=len(actual),
    )


def _precedence(name: str) -> int:
    if name in MODEL_PRECEDENCE:
        return MODEL_PRECEDENCE.index(name)
    return len(MODEL_PRECEDENCE)


def rank_models(overall: Mapping[str, ModelMetrics]) -> list[str]:
    """Model names, best first: by overall R², ties by precedence."""
    ranked: list[str] = []
    for name in sorted(overall, key=lambda n: (_precedence(n), n)):
        # Insert before the first model this one beats by more than the tolerance
        position = len(ranked)
        for i, other in enumerate(ranked):
            if overall[name].r2 > overall[other].r2 + R2_TIE_TOLERANCE:
                position = i
                break
        ranked.insert(position, name)
    return ranked


def evaluate_models(
    records: Sequence[SaleRecord],
    models: Mapping[str, PricingModel] | None = None,
    app_settings: Settings | None = None,
) -> ModelComparisonReport:
    """Fit every model to ``records`` and report how well each one explains them.

    Args:
        records: Historical sales.
        models: Models to compare; defaults to every registered model built
            on factor tables from ``records``.
        app_settings: Pricing / confidence settings.

    Returns:
        ModelComparisonReport with overall, standard-only and exotic-only
        metrics per model, the ranking and the winner.
    """
    app_settings = app_settings or settings
    tables = build_factor_tables(records, app_settings.pricing)
    if models is None:
        models = build_models(tables, app_settings.confidence)

    actuals = [r.price for r in records]
    standard_idx = [i for i, r in enumerate(records) if not r.bag.is_exotic]
    exotic_idx = [i for i, r in enumerate(records) if r.bag.is_exotic]

    predictions = {
        name: [model.predict(r.bag) for r in records]
        for name, model in models.items()
    }

    def _subset(values: Sequence[float], idx: list[int]) -> list[float]:
        return [values[i] for i in idx]

    overall: dict[str, ModelMetrics] = {}
    standard: dict[str, ModelMetrics] = {}
    exotic: dict[str, ModelMetrics] = {}
    for name, predicted in predictions.items():
        overall[name] = compute_metrics(actuals, predicted)
        standard[name] = compute_metrics(_subset(actuals, standard_idx), _subset(predicted, standard_idx))
        exotic[name] = compute_metrics(_subset(actuals, exotic_idx), _subset(predicted, exotic_idx))

    ranking = rank_models(overall)
    samples = [
        PredictionSample(
            actual=r.price,
            predictions={name: round(predictions[name][i]) for name in predictions},
            size=r.bag.size,
            is_exotic=r.bag.is_exotic,
            year=r.bag.year,
        )
        for i, r in enumerate(records[:SAMPLE_PREDICTIONS])
    ]

    report = ModelComparisonReport(
        total_sales=len(records),
        standard_sales=len(standard_idx),
        exotic_sales=len(exotic_idx),
        baseline=tables.baseline.value,
        overall=overall,
        standard=standard,
        exotic=exotic,
        ranking=ranking,
        winner=ranking[0] if ranking else MODEL_PRECEDENCE[0],
        samples=samples,
    )

    for name in ranking:
        m = overall[name]
        logger.info(
            "  %-8s R²=%.3f  MAE=%s  MAPE=%.1f%%  (standard R²=%.3f, exotic R²=%.3f)",
            name, m.r2, f"{m.mae:,.0f}", m.mape, standard[name].r2, exotic[name].r2,
        )
    logger.info("Model comparison over %d sales: winner=%s", len(records), report.winner)
    return report
