# Common utilities and shared modules
"""
Shared components used across the pricing engine:
- Data models (Pydantic schemas)
- Logging configuration
- Project configuration
"""

from .config import settings, Settings, PROJECT_ROOT, DATA_DIR
from .logging import configure_cli_logging, setup_logging

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "DATA_DIR",
    "setup_logging",
    "configure_cli_logging",
]
