"""Multi-category aggregation."""

from .orchestrator import AggregationOrchestrator, default_date_window, expand_categories

__all__ = ["AggregationOrchestrator", "default_date_window", "expand_categories"]
