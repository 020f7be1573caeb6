"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from finagg_app.config.defaults import get_default_config
from finagg_app.config.loader import ConfigLoader, Settings
from finagg_app.config.validation import ConfigValidator
from finagg_app.errors import ConfigurationError


def write_settings(config_dir: Path, text: str) -> None:
    (config_dir / "settings.yaml").write_text(text)


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()
        assert config.provider.api_url == "http://api.tushare.pro"
        assert config.provider.token is None
        assert config.query.default_report_type == "1"
        assert config.query.lookback_years == 2
        assert (config.macd.fast_period, config.macd.slow_period, config.macd.signal_period) == (12, 26, 9)


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)

    def test_defaults_only(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)
        settings = loader.load_settings(environ={})

        assert isinstance(settings, Settings)
        assert settings.provider.timeout_seconds == 30.0
        assert settings.aggregation.parallel is True

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "provider:\n  timeout_seconds: 5\nreport:\n  max_rows: 3\n")
        settings = ConfigLoader.create(tmp_path).load_settings(environ={})

        assert settings.provider.timeout_seconds == 5
        assert settings.report.max_rows == 3
        assert settings.report.max_event_rows == 10

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "provider:\n  token: from-file\n  timeout_seconds: 5\n")
        environ = {"TUSHARE_TOKEN": "from-env", "TUSHARE_TIMEOUT": "12.5"}
        settings = ConfigLoader.create(tmp_path).load_settings(environ=environ)

        assert settings.provider.token == "from-env"
        assert settings.provider.timeout_seconds == 12.5

    def test_explicit_overrides_win(self, tmp_path: Path) -> None:
        settings = ConfigLoader.create(tmp_path).load_settings(
            overrides={"aggregation": {"parallel": False}},
            environ={},
        )
        assert settings.aggregation.parallel is False

    def test_empty_env_value_ignored(self, tmp_path: Path) -> None:
        settings = ConfigLoader.create(tmp_path).load_settings(environ={"TUSHARE_TOKEN": ""})
        assert settings.provider.token is None

    def test_bad_env_timeout(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(tmp_path).load_settings(environ={"TUSHARE_TIMEOUT": "soon"})
        assert exc_info.value.setting == "TUSHARE_TIMEOUT"

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "macd:\n  slow_period: 0\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(tmp_path).load_settings(environ={})
        assert "slow_period" in str(exc_info.value)

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "provider:\n  retries: 3\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).load_settings(environ={})

    def test_non_mapping_file_rejected(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(tmp_path).load_settings(environ={})

    @pytest.mark.parametrize("content", ["provider:\n", "provider: x\n", "macd: [1, 2]\n"])
    def test_non_mapping_section_rejected(self, tmp_path: Path, content: str) -> None:
        write_settings(tmp_path, content)
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(tmp_path).load_settings(environ={})
        assert exc_info.value.setting in ("provider", "macd")
        assert "must be a mapping" in str(exc_info.value)

    def test_non_mapping_override_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(tmp_path).load_settings(overrides={"provider": "x"}, environ={})
        assert exc_info.value.setting == "provider"

    def test_empty_file(self, tmp_path: Path) -> None:
        write_settings(tmp_path, "")
        settings = ConfigLoader.create(tmp_path).load_settings(environ={})
        assert settings.query.lookback_years == 2

    def test_shipped_settings_file_is_valid(self) -> None:
        settings = ConfigLoader.create().load_settings(environ={})
        assert settings.macd.slow_period == 26


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        loader = ConfigLoader.create()
        config = loader._dataclass_to_dict(get_default_config())
        assert ConfigValidator.validate_config(config) == []

    @pytest.mark.parametrize("url", ["ftp://host/x", "api.tushare.pro", 42])
    def test_invalid_api_url(self, url) -> None:
        errors = ConfigValidator.validate_provider_params({"api_url": url})
        assert len(errors) == 1
        assert errors[0].field == "api_url"

    @pytest.mark.parametrize("timeout", [0, -1, "30", True])
    def test_invalid_timeout(self, timeout) -> None:
        errors = ConfigValidator.validate_provider_params({"timeout_seconds": timeout})
        assert [e.field for e in errors] == ["timeout_seconds"]

    def test_invalid_report_type(self) -> None:
        errors = ConfigValidator.validate_query_params({"default_report_type": "9"})
        assert errors[0].field == "default_report_type"

    def test_invalid_macd_periods(self) -> None:
        errors = ConfigValidator.validate_macd_params({"fast_period": -3, "signal_period": 1.5})
        assert {e.field for e in errors} == {"fast_period", "signal_period"}
        assert "Must be a positive integer" in errors[0].message

    def test_invalid_parallel_flag(self) -> None:
        errors = ConfigValidator.validate_config({"aggregation": {"parallel": "yes"}})
        assert errors[0].field == "parallel"

    def test_non_mapping_section(self) -> None:
        errors = ConfigValidator.validate_config({"provider": None, "query": {"lookback_years": 1}})
        assert [(e.field, e.message) for e in errors] == [("provider", "Must be a mapping")]
