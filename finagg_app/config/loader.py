"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    AggregationParams,
    DefaultConfig,
    MACDParams,
    ProviderParams,
    QueryParams,
    ReportParams,
    get_default_config,
)
from .validation import ConfigValidator

SETTINGS_FILE = "settings.yaml"

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "TUSHARE_TOKEN": ("provider", "token", str),
    "TUSHARE_API_URL": ("provider", "api_url", str),
    "TUSHARE_TIMEOUT": ("provider", "timeout_seconds", float),
}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""
    provider: ProviderParams
    query: QueryParams
    macd: MACDParams
    aggregation: AggregationParams
    report: ReportParams


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from settings.yaml, if present."""
        settings_file = self.config_dir / SETTINGS_FILE

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{settings_file} must contain a mapping",
                setting=str(settings_file)
            )

        for section, values in file_config.items():
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Section '{section}' in {settings_file} must be a mapping",
                    setting=section
                )

        return file_config

    def load_env_config(self, environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        environ = os.environ if environ is None else environ
        config: dict[str, Any] = {}

        for var, (section, key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {raw!r}", setting=var) from e
            config.setdefault(section, {})[key] = value

        return config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Environment variables and explicit overrides (highest priority)
        2. settings.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_env_config(environ))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(
        self,
        overrides: Optional[dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> Settings:
        """Merge, validate and freeze the configuration."""
        config = self.merge_config(overrides, environ)

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ConfigurationError(f"Invalid configuration: {details}", setting=errors[0].field)

        try:
            return Settings(
                provider=ProviderParams(**config["provider"]),
                query=QueryParams(**config["query"]),
                macd=MACDParams(**config["macd"]),
                aggregation=AggregationParams(**config["aggregation"]),
                report=ReportParams(**config["report"]),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
