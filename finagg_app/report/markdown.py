"""
Markdown rendering of normalized category outcomes.

Templates only interpolate already-decoded record fields. Numeric coercion
happens here, since records carry provider values untouched.
"""

import math
from collections import OrderedDict
from typing import Any, Iterable, Optional, Sequence

from ..config.defaults import ReportParams
from ..data.models import Category, CategoryOutcome, Record
from ..indicators.macd import MACDSeries

SECTION_TITLES = {
    Category.INCOME.value: "Income Statement",
    Category.BALANCE.value: "Balance Sheet",
    Category.CASHFLOW.value: "Cash Flow Statement",
    Category.FORECAST.value: "Earnings Forecast",
    Category.EXPRESS.value: "Flash Report",
    Category.INDICATORS.value: "Financial Indicators",
    Category.DIVIDEND.value: "Dividends",
    Category.HK_INCOME.value: "HK Income Statement",
    Category.HK_BALANCE.value: "HK Balance Sheet",
    Category.HK_CASHFLOW.value: "HK Cash Flow Statement",
}

FORECAST_TYPES = {
    "1": "Pre-increase",
    "2": "Pre-decrease",
    "3": "Turnaround",
    "4": "First loss",
    "5": "Continued loss",
    "6": "Continued profit",
    "7": "Slight increase",
    "8": "Slight decrease",
}

# (field, label, kind); kind: "amount" numbers, "pct" percents, "raw" as-is
STATEMENT_LINES: dict[str, tuple[tuple[str, str, str], ...]] = {
    Category.INCOME.value: (
        ("total_revenue", "Total revenue", "amount"),
        ("revenue", "Revenue", "amount"),
        ("total_cogs", "Total operating cost", "amount"),
        ("operate_profit", "Operating profit", "amount"),
        ("total_profit", "Total profit", "amount"),
        ("n_income", "Net income", "amount"),
        ("n_income_attr_p", "Net income attributable to parent", "amount"),
    ),
    Category.BALANCE.value: (
        ("total_assets", "Total assets", "amount"),
        ("total_cur_assets", "Total current assets", "amount"),
        ("total_nca", "Total non-current assets", "amount"),
        ("total_liab", "Total liabilities", "amount"),
        ("total_cur_liab", "Total current liabilities", "amount"),
        ("total_hldr_eqy_exc_min_int", "Shareholders' equity", "amount"),
    ),
    Category.CASHFLOW.value: (
        ("n_cashflow_act", "Net operating cash flow", "amount"),
        ("n_cashflow_inv_act", "Net investing cash flow", "amount"),
        ("n_cash_flows_fnc_act", "Net financing cash flow", "amount"),
        ("n_incr_cash_cash_equ", "Net increase in cash", "amount"),
        ("c_cash_equ_end_period", "Cash at end of period", "amount"),
    ),
    Category.EXPRESS.value: (
        ("revenue", "Revenue", "amount"),
        ("operate_profit", "Operating profit", "amount"),
        ("total_profit", "Total profit", "amount"),
        ("n_income", "Net income", "amount"),
        ("total_assets", "Total assets", "amount"),
        ("total_hldr_eqy_exc_min_int", "Shareholders' equity", "amount"),
        ("diluted_eps", "Diluted EPS", "raw"),
        ("diluted_roe", "Diluted ROE", "pct"),
        ("yoy_net_profit", "Net profit YoY", "pct"),
        ("yoy_sales", "Revenue YoY", "pct"),
    ),
}

INDICATOR_GROUPS = (
    ("Profitability", (
        ("eps", "EPS", "raw"),
        ("roe", "ROE", "pct"),
        ("roa", "ROA", "pct"),
        ("netprofit_margin", "Net profit margin", "pct"),
        ("grossprofit_margin", "Gross profit margin", "pct"),
    )),
    ("Solvency", (
        ("current_ratio", "Current ratio", "raw"),
        ("quick_ratio", "Quick ratio", "raw"),
        ("debt_to_assets", "Debt to assets", "pct"),
    )),
    ("Efficiency", (
        ("inv_turn", "Inventory turnover", "raw"),
        ("ar_turn", "Receivables turnover", "raw"),
        ("assets_turn", "Asset turnover", "raw"),
    )),
)

DIVIDEND_LINES = (
    ("stk_div", "Stock dividend per 10 shares", "raw"),
    ("stk_bo_rate", "Bonus shares per 10 shares", "raw"),
    ("cash_div", "Cash dividend per 10 shares", "raw"),
    ("cash_div_tax", "Pre-tax cash dividend per 10 shares", "raw"),
    ("record_date", "Record date", "raw"),
    ("ex_date", "Ex-dividend date", "raw"),
    ("pay_date", "Payment date", "raw"),
)


def format_number(value: Any) -> str:
    """Format a provider value as a grouped number with up to 2 decimals."""
    if value is None or value == "":
        return "N/A"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "N/A"
    if not math.isfinite(number):
        return "N/A"
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _format_value(value: Any, kind: str) -> str:
    if kind == "amount":
        return format_number(value)
    if kind == "pct":
        return f"{value}%"
    return str(value)


def _render_lines(record: Record, lines: Iterable[tuple[str, str, str]],
                  bullet: bool = False) -> list[str]:
    template = "- {}: {}" if bullet else "**{}**: {}"
    return [
        template.format(label, _format_value(record[field], kind))
        for field, label, kind in lines
        if _present(record.get(field))
    ]


class ReportRenderer:
    """Renders category outcomes and indicator series as markdown."""

    def __init__(self, config: Optional[ReportParams] = None):
        self.config = config or ReportParams()

    def render_company_report(self, identifier: str, outcomes: Sequence[CategoryOutcome]) -> str:
        """Render the multi-section company performance report."""
        parts = [f"# {identifier} Financial Performance\n"]

        for outcome in outcomes:
            parts.append(self.render_section(outcome))
            parts.append("---\n")

        return "\n".join(parts)

    def render_section(self, outcome: CategoryOutcome) -> str:
        """Render one category; failures and empty results are labelled distinctly."""
        title = SECTION_TITLES.get(outcome.category, outcome.category)
        header = f"## {title}\n"

        if not outcome.succeeded:
            return f"{header}\nFetch failed: {outcome.error}\n"
        if not outcome.has_records:
            return f"{header}\nNo data available\n"

        return f"{header}\n{self.render_records(outcome.category, list(outcome.records))}"

    def render_records(self, category: str, records: list[Record]) -> str:
        """Render the body of one category section."""
        if category in STATEMENT_LINES:
            return self._render_statements(category, records)
        if category == Category.FORECAST.value:
            return self._render_forecast(records)
        if category == Category.INDICATORS.value:
            return self._render_indicators(records)
        if category == Category.DIVIDEND.value:
            return self._render_dividend(records)
        if category in (Category.HK_INCOME.value, Category.HK_BALANCE.value,
                        Category.HK_CASHFLOW.value):
            return self._render_hk_items(records)
        return self._render_generic(records)

    def render_hk_statement(self, identifier: str, category: str, records: list[Record]) -> str:
        """Render the single-statement HK report."""
        title = SECTION_TITLES.get(category, category)
        if not records:
            return (f"# {identifier} {title}\n\n"
                    "No data found; check the security code or date range\n")
        return f"# {identifier} {title}\n\n{self.render_records(category, records)}"

    def render_macd(self, series: MACDSeries, last: int = 10) -> str:
        """Render the trailing rows of a MACD series as a markdown table."""
        rows = ["| # | DIF | DEA | MACD |", "|---|---|---|---|"]
        total = len(series.difference)
        for i in range(max(0, total - last), total):
            cells = [series.difference[i], series.signal[i], series.oscillator[i]]
            text = ["N/A" if cell is None else f"{cell:.4f}" for cell in cells]
            rows.append(f"| {i} | {text[0]} | {text[1]} | {text[2]} |")
        return "\n".join(rows) + "\n"

    def _render_statements(self, category: str, records: list[Record]) -> str:
        out = []
        for record in records[:self.config.max_rows]:
            out.append(f"### Period {record.get('end_date') or record.get('period')}")
            announced = f"**Announced**: {record.get('ann_date') or 'N/A'}"
            if category != Category.EXPRESS.value:
                announced += f"  **Final announcement**: {record.get('f_ann_date') or 'N/A'}"
            out.append(announced + "\n")
            out.extend(_render_lines(record, STATEMENT_LINES[category]))
            out.append("")
        return "\n".join(out) + "\n"

    def _render_forecast(self, records: list[Record]) -> str:
        out = []
        for record in records[:self.config.max_event_rows]:
            forecast_type = record.get("type")
            out.append(f"### Forecast for {record.get('end_date')}")
            out.append(f"**Announced**: {record.get('ann_date')}  "
                       f"**Type**: {FORECAST_TYPES.get(str(forecast_type), forecast_type)}")
            if _present(record.get("p_change_min")) and _present(record.get("p_change_max")):
                out.append(f"**Net profit change**: {record['p_change_min']}% ~ {record['p_change_max']}%")
            if _present(record.get("net_profit_min")) and _present(record.get("net_profit_max")):
                out.append(f"**Expected net profit**: {format_number(record['net_profit_min'])}"
                           f" ~ {format_number(record['net_profit_max'])}")
            out.extend(_render_lines(record, (
                ("last_parent_net", "Net profit same period last year", "amount"),
                ("summary", "Summary", "raw"),
                ("change_reason", "Reason for change", "raw"),
            )))
            out.append("")
        return "\n".join(out) + "\n"

    def _render_indicators(self, records: list[Record]) -> str:
        out = []
        for record in records[:self.config.max_rows]:
            out.append(f"### Indicators for {record.get('end_date')}")
            out.append(f"**Announced**: {record.get('ann_date')}\n")
            for group, lines in INDICATOR_GROUPS:
                out.append(f"**{group}**:")
                out.extend(_render_lines(record, lines, bullet=True))
                out.append("")
        return "\n".join(out) + "\n"

    def _render_dividend(self, records: list[Record]) -> str:
        out = []
        for record in records[:self.config.max_event_rows]:
            out.append(f"### Dividend plan for {record.get('end_date')}")
            out.append(f"**Announced**: {record.get('ann_date')}  "
                       f"**Progress**: {record.get('div_proc') or 'N/A'}")
            out.extend(_render_lines(record, DIVIDEND_LINES))
            out.append("")
        return "\n".join(out) + "\n"

    def _render_hk_items(self, records: list[Record]) -> str:
        # HK statements are long-format: one row per (period, line item)
        periods: "OrderedDict[Any, list[Record]]" = OrderedDict()
        for record in records:
            periods.setdefault(record.get("end_date"), []).append(record)

        out = []
        for end_date, rows in list(periods.items())[:self.config.max_rows]:
            out.append(f"### Period {end_date}\n")
            for row in rows:
                out.append(f"**{row.get('ind_name')}**: {format_number(row.get('ind_value'))}")
            out.append("")
        return "\n".join(out) + "\n"

    def _render_generic(self, records: list[Record]) -> str:
        out = []
        for record in records[:self.config.max_rows]:
            out.append("### Record")
            for field, value in list(record.items())[:10]:
                if value is not None:
                    out.append(f"**{field}**: {value}")
            out.append("")
        return "\n".join(out) + "\n"
