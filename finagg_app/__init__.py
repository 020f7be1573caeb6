"""
FinAgg App - Financial Disclosure Aggregation Client

Fetches corporate financial disclosures (statements, forecasts, flash reports,
ratio indicators, dividend actions) from a tabular data provider, normalizes
them into row records and renders multi-section reports. Also ships a MACD
calculator for numeric price series.
"""

__version__ = "0.1.0"
__author__ = "FinAgg Team"
