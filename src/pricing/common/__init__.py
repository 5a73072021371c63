"""Common utilities shared across pricing modules."""

from .config import Config
from . import stats

__all__ = ["Config", "stats"]
