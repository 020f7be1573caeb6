"""
Error classification tests for the aggregation client.
"""

from finagg_app.errors import (
    ConfigurationError,
    FinaggError,
    IndicatorComputationError,
    MalformedPayloadError,
    NoDataError,
    ProtocolError,
    TransportError,
    UnsupportedCategoryError,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_common_base(self):
        for error_type in (ConfigurationError, UnsupportedCategoryError, TransportError,
                           ProtocolError, MalformedPayloadError, NoDataError,
                           IndicatorComputationError):
            assert issubclass(error_type, FinaggError)

    def test_base_context(self):
        error = FinaggError("base error")
        assert error.context == {}
        assert error.recoverable is True

    def test_configuration_error_unrecoverable(self):
        error = ConfigurationError("missing token", setting="token")
        assert error.recoverable is False
        assert error.setting == "token"

    def test_protocol_error_attributes(self):
        error = ProtocolError("Provider error: denied", provider_code=40203, provider_message="denied")
        assert error.status_code is None
        assert error.provider_code == 40203
        assert error.provider_message == "denied"

    def test_transport_error_context(self):
        error = TransportError("timed out", endpoint="income", context={"timeout_seconds": 30})
        assert error.endpoint == "income"
        assert error.context == {"timeout_seconds": 30}

    def test_no_data_error(self):
        error = NoDataError("No financial data found for 000001.SZ", identifier="000001.SZ")
        assert error.identifier == "000001.SZ"
        assert error.outcomes == []

    def test_indicator_error(self):
        error = IndicatorComputationError("not finite", index=3, value=float("inf"))
        assert error.index == 3
        assert error.recoverable is False
