"""
Main financial report engine.

Wires configuration, the provider client, the aggregation orchestrator and
the markdown renderer together, and exposes the tool operations:

    Query → Orchestrator → Category outcomes → Report
    Prices → MACD calculator → Indicator series
"""

from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from .aggregation.orchestrator import AggregationOrchestrator
from .config.loader import ConfigLoader, Settings
from .data.categories import hk_category
from .data.models import CategoryOutcome, Query, Record
from .data.params import CategoryParameterPolicy
from .indicators.macd import MACDSeries, calculate_macd
from .provider.client import ProviderClient
from .report.markdown import ReportRenderer

logger = structlog.get_logger(__name__)


class FinancialReportEngine:
    """Coordinator for company performance reports and MACD calculations."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        config_dir: Optional[Path] = None,
        client: Optional[ProviderClient] = None,
    ) -> None:
        """Initialize the engine; settings are loaded from config_dir when not given."""
        self.settings = settings or ConfigLoader.create(config_dir).load_settings()

        self.client = client or ProviderClient(self.settings.provider)
        self.orchestrator = AggregationOrchestrator(
            client=self.client,
            policy=CategoryParameterPolicy(self.settings.query.default_report_type),
            query_params=self.settings.query,
            aggregation_params=self.settings.aggregation,
        )
        self.renderer = ReportRenderer(self.settings.report)

        logger.debug("Financial report engine initialized", api_url=self.settings.provider.api_url)

    def fetch_company_performance(self, query: Query,
                                  today: Optional[date] = None) -> list[CategoryOutcome]:
        """Fetch normalized outcomes for every category the query selects."""
        return self.orchestrator.run(query, today)

    def company_performance(self, query: Query, today: Optional[date] = None) -> str:
        """Fetch and render the multi-section company performance report."""
        outcomes = self.fetch_company_performance(query, today)

        logger.info(
            "Company performance fetched",
            identifier=query.identifier,
            succeeded=sum(1 for outcome in outcomes if outcome.succeeded),
            failed=sum(1 for outcome in outcomes if not outcome.succeeded),
        )
        return self.renderer.render_company_report(query.identifier, outcomes)

    def fetch_hk_statement(
        self,
        identifier: str,
        statement: str,
        period: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        item_name: Optional[str] = None,
        today: Optional[date] = None,
    ) -> tuple[str, list[Record]]:
        """Fetch one Hong Kong statement (income, balance or cashflow)."""
        query = Query(
            identifier=identifier,
            category=hk_category(statement),
            period=period,
            start_date=start_date,
            end_date=end_date,
            item_name=item_name,
        )
        return self.orchestrator.fetch_single(query, today)

    def company_performance_hk(self, identifier: str, statement: str, **kwargs: Any) -> str:
        """Fetch and render one Hong Kong statement."""
        category, records = self.fetch_hk_statement(identifier, statement, **kwargs)
        return self.renderer.render_hk_statement(identifier, category, records)

    def macd(
        self,
        prices: Sequence[float],
        fast_period: Optional[int] = None,
        slow_period: Optional[int] = None,
        signal_period: Optional[int] = None,
    ) -> MACDSeries:
        """Calculate MACD with configured periods unless overridden."""
        params = self.settings.macd
        return calculate_macd(
            prices,
            fast_period=params.fast_period if fast_period is None else fast_period,
            slow_period=params.slow_period if slow_period is None else slow_period,
            signal_period=params.signal_period if signal_period is None else signal_period,
        )
