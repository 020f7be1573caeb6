"""Default configuration parameters for the aggregation client."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProviderParams:
    """Upstream tabular API connection parameters."""
    api_url: str = "http://api.tushare.pro"
    token: Optional[str] = None                  # Supplied via env or settings.yaml
    timeout_seconds: float = 30.0                # Wall-clock deadline per exchange


@dataclass(frozen=True)
class QueryParams:
    """Defaults applied to queries that leave fields unset."""
    default_report_type: str = "1"               # Consolidated statement
    lookback_years: int = 2                      # Default start = Jan 1, N years back


@dataclass(frozen=True)
class MACDParams:
    """MACD indicator periods."""
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9


@dataclass(frozen=True)
class AggregationParams:
    """Multi-category fan-out parameters."""
    parallel: bool = True


@dataclass(frozen=True)
class ReportParams:
    """Markdown rendering limits."""
    max_rows: int = 5                            # Statement periods per section
    max_event_rows: int = 10                     # Forecast/dividend rows per section


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    provider: ProviderParams
    query: QueryParams
    macd: MACDParams
    aggregation: AggregationParams
    report: ReportParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        provider=ProviderParams(),
        query=QueryParams(),
        macd=MACDParams(),
        aggregation=AggregationParams(),
        report=ReportParams(),
    )
