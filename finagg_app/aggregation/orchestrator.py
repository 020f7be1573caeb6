"""
Multi-category fetch coordinator.

Fans a query out across one or all disclosure categories. Every category is
an isolated job: parameters → provider exchange → decode. Whatever goes wrong
inside a job becomes that category's failure outcome and never touches its
siblings. Outcomes come back in expansion order regardless of which job
finished first.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional

from ..config.defaults import AggregationParams, QueryParams
from ..data.decoder import TabularDecoder
from ..data.models import AGGREGATE_ORDER, ALL_CATEGORIES, CategoryOutcome, Query, Record
from ..data.params import CategoryParameterPolicy
from ..errors import FinaggError, NoDataError
from ..logging.config import AGGREGATION_SUBSYSTEM, get_logger, log_category_outcome
from ..provider.client import ProviderClient

logger = get_logger(__name__)


def default_date_window(today: date, lookback_years: int = 2) -> tuple[str, str]:
    """Default (start, end): Jan 1 ``lookback_years`` back through Dec 31 this year."""
    return f"{today.year - lookback_years}0101", f"{today.year}1231"


def expand_categories(selector: str) -> list[str]:
    """Expand a category selector into the ordered list of categories to fetch."""
    if selector == ALL_CATEGORIES:
        return list(AGGREGATE_ORDER)
    if not selector:
        return []
    return [selector]


class AggregationOrchestrator:
    """Runs per-category fetch jobs and collects their outcomes."""

    def __init__(
        self,
        client: ProviderClient,
        policy: Optional[CategoryParameterPolicy] = None,
        decoder: Optional[TabularDecoder] = None,
        query_params: Optional[QueryParams] = None,
        aggregation_params: Optional[AggregationParams] = None,
    ):
        self.client = client
        self.query_params = query_params or QueryParams()
        self.policy = policy or CategoryParameterPolicy(self.query_params.default_report_type)
        self.decoder = decoder or TabularDecoder()
        self.aggregation_params = aggregation_params or AggregationParams()

    def run(self, query: Query, today: Optional[date] = None) -> list[CategoryOutcome]:
        """
        Fetch every category the query selects.

        Args:
            query: Caller query; ``category`` may be a single name or "all"
            today: Reference date for default date bounds (defaults to today)

        Returns:
            One outcome per expanded category, in expansion order

        Raises:
            ConfigurationError: If the provider token is missing
            ValueError: If the selector expands to no categories
            NoDataError: If no category produced any records
        """
        categories = expand_categories(query.category)
        if not categories:
            raise ValueError(f"No categories selected by {query.category!r}")

        self.client.ensure_configured()

        # One default window for the whole invocation
        default_start, default_end = default_date_window(
            today or date.today(), self.query_params.lookback_years
        )

        logger.info(
            "Aggregation started",
            subsystem=AGGREGATION_SUBSYSTEM,
            identifier=query.identifier,
            categories=categories,
            parallel=self.aggregation_params.parallel
        )

        if self.aggregation_params.parallel and len(categories) > 1:
            with ThreadPoolExecutor(max_workers=len(categories),
                                    thread_name_prefix="category") as executor:
                futures = [
                    executor.submit(self._run_category, category, query, default_start, default_end)
                    for category in categories
                ]
                outcomes = [future.result() for future in futures]
        else:
            outcomes = [
                self._run_category(category, query, default_start, default_end)
                for category in categories
            ]

        if not any(outcome.has_records for outcome in outcomes):
            raise NoDataError(
                f"No financial data found for {query.identifier}",
                identifier=query.identifier,
                outcomes=outcomes
            )

        return outcomes

    def fetch_single(self, query: Query, today: Optional[date] = None) -> tuple[str, list[Record]]:
        """
        Fetch exactly one category without failure isolation.

        Returns:
            (category, records); errors propagate to the caller
        """
        if query.category == ALL_CATEGORIES:
            raise ValueError("fetch_single requires a single category")

        default_start, default_end = default_date_window(
            today or date.today(), self.query_params.lookback_years
        )
        return query.category, self._fetch(query.category, query, default_start, default_end)

    def _run_category(self, category: str, query: Query,
                      default_start: str, default_end: str) -> CategoryOutcome:
        try:
            records = self._fetch(category, query, default_start, default_end)
        except Exception as e:
            # Unrecoverable errors such as a missing token abort the whole query
            if isinstance(e, FinaggError) and not e.recoverable:
                raise
            log_category_outcome(logger, query.identifier, category, False,
                                 reason=str(e), context={"error_type": type(e).__name__})
            return CategoryOutcome.failure(category, str(e))

        log_category_outcome(logger, query.identifier, category, True, record_count=len(records))
        return CategoryOutcome.success(category, records)

    def _fetch(self, category: str, query: Query,
               default_start: Optional[str], default_end: Optional[str]) -> list[Record]:
        spec = self.policy.spec_for(category)
        params = self.policy.build_params(category, query, default_start, default_end)
        fields = self.policy.fields_for(category, query)

        response = self.client.execute(spec.api_name, params, fields)
        return self.decoder.decode(response.data)
