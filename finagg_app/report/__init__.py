"""Markdown presentation of aggregation results."""

from .markdown import ReportRenderer, format_number

__all__ = ["ReportRenderer", "format_number"]
