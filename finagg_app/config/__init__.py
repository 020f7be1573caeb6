"""Configuration management for the aggregation client."""

from .defaults import DefaultConfig, get_default_config
from .loader import ConfigLoader, Settings

__all__ = ["ConfigLoader", "DefaultConfig", "Settings", "get_default_config"]
