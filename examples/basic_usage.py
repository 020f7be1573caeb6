#!/usr/bin/env python3
"""
Basic Usage Example - Financial Disclosure Aggregation Client

This script demonstrates the basic usage of the aggregation client. It shows how to:
- Initialize the engine from settings.yaml and the environment
- Fetch every disclosure category for one security
- Fetch a single Hong Kong statement
- Calculate MACD over a closing price series

The fetch steps need TUSHARE_TOKEN; the MACD step runs offline.

Run: python examples/basic_usage.py [SECURITY_CODE]
"""

import math
import sys

from finagg_app.data.models import Query
from finagg_app.engine import FinancialReportEngine
from finagg_app.errors import ConfigurationError, FinaggError, NoDataError
from finagg_app.logging.config import configure_logging


def simulated_closes(count: int = 60) -> list[float]:
    """Generate a smooth synthetic closing price series."""
    return [round(10 + 2 * math.sin(i / 6) + i * 0.05, 2) for i in range(count)]


def main():
    """Main demo function."""
    identifier = sys.argv[1] if len(sys.argv) > 1 else "000001.SZ"

    print("🚀 Financial Disclosure Aggregation Client - Basic Usage Demo")
    print("=" * 60)

    configure_logging(level="WARNING")

    print("1. Initializing the engine...")
    engine = FinancialReportEngine()
    print(f"   Provider: {engine.settings.provider.api_url}")
    print()

    print(f"2. Fetching all disclosure categories for {identifier}...")
    try:
        outcomes = engine.fetch_company_performance(Query(identifier, "all"))
        for outcome in outcomes:
            status = f"{len(outcome.records)} records" if outcome.succeeded else f"failed: {outcome.error}"
            print(f"   {outcome.category:<11} {status}")
        print()
        print(engine.renderer.render_company_report(identifier, outcomes))
    except ConfigurationError as e:
        print(f"   Skipped: {e}")
    except NoDataError as e:
        print(f"   {e}")
    print()

    print("3. Fetching the Tencent HK income statement...")
    try:
        print(engine.company_performance_hk("00700.HK", "income"))
    except ConfigurationError as e:
        print(f"   Skipped: {e}")
    except FinaggError as e:
        print(f"   Failed: {e}")
    print()

    print("4. Calculating MACD over simulated closes...")
    closes = simulated_closes()
    series = engine.macd(closes)
    print(engine.renderer.render_macd(series, last=5))

    print("✅ Demo completed!")


if __name__ == "__main__":
    main()
