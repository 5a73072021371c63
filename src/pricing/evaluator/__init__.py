"""Model Evaluator Module - R², MAE and MAPE comparison of the pricing models."""

from .evaluator import compute_metrics, evaluate_models, rank_models

__all__ = ["compute_metrics", "evaluate_models", "rank_models"]
