"""Command-line entry point: company performance reports and MACD."""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Sequence

import structlog

from .data.models import AGGREGATE_ORDER, ALL_CATEGORIES, Query
from .engine import FinancialReportEngine
from .errors import FinaggError, NoDataError
from .logging.config import configure_logging

logger = structlog.get_logger(__name__)


def _split_csv(value: Optional[str]) -> Optional[tuple[str, ...]]:
    if not value:
        return None
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_prices(value: str) -> list[float]:
    try:
        return [float(part) for part in value.split(",") if part.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid price list: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finagg",
        description="Financial disclosure aggregation client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  finagg company-performance 000001.SZ --category all
  finagg company-performance 000001.SZ --category income --period 20231231
  finagg company-performance 00700.HK --market hk --category income
  finagg macd --prices 10,10.5,11,10.8,11.2
        """
    )
    parser.add_argument("--config-dir", type=Path, help="Directory holding settings.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON")

    subparsers = parser.add_subparsers(dest="command", required=True)

    perf = subparsers.add_parser("company-performance", help="Fetch financial disclosures")
    perf.add_argument("identifier", help="Security code, e.g. 000001.SZ or 00700.HK")
    perf.add_argument(
        "--category",
        required=True,
        choices=list(AGGREGATE_ORDER) + [ALL_CATEGORIES],
        help="Disclosure category, or 'all' (A-share only)"
    )
    perf.add_argument("--market", choices=["cn", "hk"], default="cn")
    perf.add_argument("--period", help="Report period, YYYYMMDD")
    perf.add_argument("--start-date", help="Start date, YYYYMMDD")
    perf.add_argument("--end-date", help="End date, YYYYMMDD")
    perf.add_argument("--report-type", choices=["1", "2", "3", "4", "5"])
    perf.add_argument("--fields", help="Comma-separated field filter")
    perf.add_argument("--item-name", help="HK line item filter")
    perf.add_argument("--json", action="store_true", help="Print records as JSON")

    macd = subparsers.add_parser("macd", help="Calculate MACD over a price list")
    macd.add_argument("--prices", required=True, type=_parse_prices,
                      help="Comma-separated prices, oldest first")
    macd.add_argument("--fast", type=int)
    macd.add_argument("--slow", type=int)
    macd.add_argument("--signal", type=int)
    macd.add_argument("--json", action="store_true", help="Print series as JSON")

    return parser


def _run_company_performance(engine: FinancialReportEngine, args: argparse.Namespace) -> str:
    if args.market == "hk":
        if args.category not in ("income", "balance", "cashflow"):
            raise FinaggError(f"HK market supports income, balance, cashflow; got {args.category}")
        unsupported = [flag for flag, value in (("--fields", args.fields),
                                                ("--report-type", args.report_type)) if value]
        if unsupported:
            raise FinaggError(f"HK market does not accept {', '.join(unsupported)}; "
                              "use --item-name to narrow line items")
        category, records = engine.fetch_hk_statement(
            args.identifier,
            args.category,
            period=args.period,
            start_date=args.start_date,
            end_date=args.end_date,
            item_name=args.item_name,
        )
        if args.json:
            return json.dumps({"category": category, "records": records}, ensure_ascii=False, indent=2)
        return engine.renderer.render_hk_statement(args.identifier, category, records)

    query = Query(
        identifier=args.identifier,
        category=args.category,
        period=args.period,
        start_date=args.start_date,
        end_date=args.end_date,
        report_type=args.report_type,
        fields=_split_csv(args.fields),
    )
    outcomes = engine.fetch_company_performance(query)
    if args.json:
        return json.dumps([asdict(outcome) for outcome in outcomes], ensure_ascii=False, indent=2)
    return engine.renderer.render_company_report(query.identifier, outcomes)


def _run_macd(engine: FinancialReportEngine, args: argparse.Namespace) -> str:
    series = engine.macd(args.prices, args.fast, args.slow, args.signal)
    if args.json:
        return json.dumps(asdict(series), indent=2)
    return engine.renderer.render_macd(series)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, format_json=args.log_json)

    try:
        engine = FinancialReportEngine(config_dir=args.config_dir)
        if args.command == "macd":
            output = _run_macd(engine, args)
        else:
            output = _run_company_performance(engine, args)

    except NoDataError as e:
        logger.warning("No data", identifier=e.identifier)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except (FinaggError, ValueError) as e:
        logger.error("Command failed", command=args.command, error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
