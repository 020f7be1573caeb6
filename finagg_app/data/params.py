"""
Per-category wire parameter policy.

Maps a generic Query onto the parameter shape a provider endpoint accepts.
Each ParamShape has its own builder; every builder first resolves a single
report window variant (ExactPeriod or DateRange), so a request never carries
both ``period`` and ``start_date``/``end_date``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .categories import get_category_spec
from .models import CategorySpec, ParamShape, Query

DEFAULT_REPORT_TYPE = "1"


@dataclass(frozen=True)
class ExactPeriod:
    """Single report period, e.g. 20231231."""
    period: str

    def to_wire(self) -> dict[str, str]:
        return {"period": self.period}


@dataclass(frozen=True)
class DateRange:
    """Announcement date range; either bound may be absent."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def to_wire(self) -> dict[str, str]:
        wire = {}
        if self.start_date:
            wire["start_date"] = self.start_date
        if self.end_date:
            wire["end_date"] = self.end_date
        return wire


ReportWindow = Union[ExactPeriod, DateRange]


def _query_range(query: Query, default_start: Optional[str],
                 default_end: Optional[str]) -> DateRange:
    return DateRange(
        start_date=query.start_date or default_start,
        end_date=query.end_date or default_end,
    )


def _period_or_range(query: Query, default_start: Optional[str],
                     default_end: Optional[str]) -> ReportWindow:
    # An exact period wins over any date range
    if query.period:
        return ExactPeriod(query.period)
    return _query_range(query, default_start, default_end)


def _build_period_or_range_with_variant(query: Query, default_start: Optional[str],
                                        default_end: Optional[str]) -> dict[str, Any]:
    params: dict[str, Any] = {"ts_code": query.identifier}
    params.update(_period_or_range(query, default_start, default_end).to_wire())
    params["report_type"] = query.report_type or DEFAULT_REPORT_TYPE
    return params


def _build_range_only(query: Query, default_start: Optional[str],
                      default_end: Optional[str]) -> dict[str, Any]:
    # period and report_type are not accepted by these endpoints
    params: dict[str, Any] = {"ts_code": query.identifier}
    params.update(_query_range(query, default_start, default_end).to_wire())
    return params


def _build_period_or_full_range_with_item(query: Query, default_start: Optional[str],
                                          default_end: Optional[str]) -> dict[str, Any]:
    params: dict[str, Any] = {"ts_code": query.identifier}
    window = _period_or_range(query, default_start, default_end)
    # A half-open range is dropped rather than sent
    if isinstance(window, ExactPeriod) or (window.start_date and window.end_date):
        params.update(window.to_wire())
    if query.item_name:
        params["ind_name"] = query.item_name
    return params


ShapeBuilder = Callable[[Query, Optional[str], Optional[str]], dict[str, Any]]

SHAPE_BUILDERS: dict[ParamShape, ShapeBuilder] = {
    ParamShape.PERIOD_OR_RANGE_WITH_VARIANT: _build_period_or_range_with_variant,
    ParamShape.RANGE_ONLY: _build_range_only,
    ParamShape.RANGE_ONLY_NO_VARIANT: _build_range_only,
    ParamShape.PERIOD_OR_FULL_RANGE_WITH_ITEM: _build_period_or_full_range_with_item,
}


class CategoryParameterPolicy:
    """Derives provider wire parameters for a (category, query) pair."""

    def __init__(self, default_report_type: str = DEFAULT_REPORT_TYPE):
        self.default_report_type = default_report_type

    def spec_for(self, category: str) -> CategorySpec:
        """Registered CategorySpec; raises UnsupportedCategoryError."""
        return get_category_spec(category)

    def build_params(
        self,
        category: str,
        query: Query,
        default_start: Optional[str] = None,
        default_end: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Build the ``params`` object for one provider request.

        Args:
            category: Registered category name
            query: Caller query
            default_start: Start date used when the query leaves it unset
            default_end: End date used when the query leaves it unset

        Returns:
            Wire parameters for the category's endpoint

        Raises:
            UnsupportedCategoryError: If the category is not registered
        """
        spec = self.spec_for(category)
        params = SHAPE_BUILDERS[spec.shape](query, default_start, default_end)

        if "report_type" in params and not query.report_type:
            params["report_type"] = self.default_report_type

        return params

    def fields_for(self, category: str, query: Query) -> Optional[str]:
        """Comma-joined field filter: the caller's, else the category default."""
        if query.fields:
            return ",".join(query.fields)
        spec = self.spec_for(category)
        if spec.default_fields:
            return ",".join(spec.default_fields)
        return None
