"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_provider_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate provider connection parameters."""
        errors = []

        if "api_url" in params:
            value = params["api_url"]
            parsed = urlparse(value) if isinstance(value, str) else None
            if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(ValidationError(
                    field="api_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if params.get("token") is not None and not isinstance(params["token"], str):
            errors.append(ValidationError(
                field="token",
                message="Must be a string",
                value=params["token"]
            ))

        return errors

    @staticmethod
    def validate_query_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate query default parameters."""
        errors = []

        if "default_report_type" in params:
            value = params["default_report_type"]
            if value not in ("1", "2", "3", "4", "5"):
                errors.append(ValidationError(
                    field="default_report_type",
                    message="Must be one of '1'..'5'",
                    value=value
                ))

        if "lookback_years" in params:
            value = params["lookback_years"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="lookback_years",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_macd_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate MACD periods."""
        errors = []

        for name in ("fast_period", "slow_period", "signal_period"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_report_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate report rendering limits."""
        errors = []

        for name in ("max_rows", "max_event_rows"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a positive integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        # Section values must be mappings before their fields can be checked
        for section, values in config.items():
            if not isinstance(values, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=values
                ))
        if errors:
            return errors

        if "provider" in config:
            errors.extend(ConfigValidator.validate_provider_params(config["provider"]))

        if "query" in config:
            errors.extend(ConfigValidator.validate_query_params(config["query"]))

        if "macd" in config:
            errors.extend(ConfigValidator.validate_macd_params(config["macd"]))

        if "report" in config:
            errors.extend(ConfigValidator.validate_report_params(config["report"]))

        if "aggregation" in config:
            value = config["aggregation"].get("parallel", True)
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="parallel",
                    message="Must be a boolean",
                    value=value
                ))

        return errors
