"""
Canonical data models for queries, provider responses and category outcomes.

Records are plain field-keyed dicts. Values are passed through exactly as the
provider returned them; numeric coercion is the presentation layer's job.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

Record = dict[str, Any]

ALL_CATEGORIES = "all"


class Category(str, Enum):
    """Financial disclosure categories served by the provider."""
    INCOME = "income"
    BALANCE = "balance"
    CASHFLOW = "cashflow"
    FORECAST = "forecast"
    EXPRESS = "express"
    INDICATORS = "indicators"
    DIVIDEND = "dividend"
    # Hong Kong listed statements
    HK_INCOME = "hk_income"
    HK_BALANCE = "hk_balance"
    HK_CASHFLOW = "hk_cashflow"


# Expansion order for the "all" selector
AGGREGATE_ORDER: tuple[str, ...] = (
    Category.INCOME.value,
    Category.BALANCE.value,
    Category.CASHFLOW.value,
    Category.FORECAST.value,
    Category.EXPRESS.value,
    Category.INDICATORS.value,
    Category.DIVIDEND.value,
)


class ParamShape(Enum):
    """Wire parameter families accepted by provider endpoints."""
    PERIOD_OR_RANGE_WITH_VARIANT = "period_or_range_with_variant"
    RANGE_ONLY = "range_only"
    RANGE_ONLY_NO_VARIANT = "range_only_no_variant"
    PERIOD_OR_FULL_RANGE_WITH_ITEM = "period_or_full_range_with_item"


@dataclass(frozen=True)
class CategorySpec:
    """Static description of one provider endpoint."""
    name: str
    api_name: str
    shape: ParamShape
    default_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class Query:
    """Caller query for one security."""
    identifier: str
    category: str
    period: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    report_type: Optional[str] = None
    fields: Optional[tuple[str, ...]] = None
    item_name: Optional[str] = None

    def __post_init__(self):
        if not self.identifier or not self.identifier.strip():
            raise ValueError("identifier must be a non-empty string")
        if isinstance(self.category, Category):
            object.__setattr__(self, "category", self.category.value)
        if self.fields is not None and not isinstance(self.fields, tuple):
            object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class WireResponse:
    """Raw provider reply: status code, message and columnar payload."""
    code: int
    msg: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    @classmethod
    def from_json(cls, body: dict[str, Any]) -> "WireResponse":
        """Build from the decoded JSON body."""
        return cls(code=body.get("code", -1), msg=body.get("msg"), data=body.get("data"))

    @property
    def ok(self) -> bool:
        """True if the provider reported success."""
        return self.code == 0


@dataclass(frozen=True)
class CategoryOutcome:
    """Result of one category fetch: records on success, a reason on failure."""
    category: str
    records: Optional[tuple[Record, ...]] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, category: str, records: list[Record]) -> "CategoryOutcome":
        """Create successful outcome, possibly with zero records."""
        return cls(category=category, records=tuple(records))

    @classmethod
    def failure(cls, category: str, reason: str) -> "CategoryOutcome":
        """Create failed outcome."""
        return cls(category=category, error=reason)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def has_records(self) -> bool:
        return bool(self.records)
