"""
Pricing Engine

Modules:
- classifier: Normalize free-text bag attributes into canonical categories
- segments: Per-attribute factor tables and market guide summaries
- estimator: Ratio / additive / hybrid pricing models and the pricing service
- evaluator: Fit metrics and ranking of the pricing models
- repository: Sales repositories (Supabase, SQLite, in-memory)
- database: SQLite storage layer
- common: Shared utilities
"""

__version__ = "0.1.0"
