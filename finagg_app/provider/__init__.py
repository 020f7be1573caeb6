"""Upstream tabular data provider access."""

from .client import ProviderClient

__all__ = ["ProviderClient"]
