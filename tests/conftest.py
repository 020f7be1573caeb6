"""Pytest configuration and shared fixtures."""

import threading
from typing import Any, Optional

import pytest

from finagg_app.config.defaults import ProviderParams
from finagg_app.data.models import WireResponse
from finagg_app.errors import ConfigurationError


class FakeProviderClient:
    """In-memory stand-in for ProviderClient keyed by endpoint name."""

    def __init__(self, responses: Optional[dict[str, Any]] = None, token: Optional[str] = "test-token"):
        self.responses = responses or {}
        self.token = token
        self.calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def ensure_configured(self) -> None:
        if not self.token:
            raise ConfigurationError("Provider token is not configured", setting="token")

    def execute(self, api_name: str, params: dict[str, Any], fields: Optional[str] = None) -> WireResponse:
        with self._lock:
            self.calls.append({"api_name": api_name, "params": dict(params), "fields": fields})
        result = self.responses.get(api_name, wire_response([], []))
        if isinstance(result, Exception):
            raise result
        return result

    def params_for(self, api_name: str) -> dict[str, Any]:
        for call in self.calls:
            if call["api_name"] == api_name:
                return call["params"]
        raise AssertionError(f"No call recorded for {api_name}")


def wire_response(fields: list[str], items: list[list[Any]], code: int = 0,
                  msg: Optional[str] = None) -> WireResponse:
    """Build a WireResponse with a columnar payload."""
    return WireResponse(code=code, msg=msg, data={"fields": fields, "items": items})


@pytest.fixture
def provider_params() -> ProviderParams:
    """Provider settings pointing at a dummy endpoint."""
    return ProviderParams(api_url="http://provider.test/api", token="test-token", timeout_seconds=0.5)


@pytest.fixture
def income_payload() -> dict[str, Any]:
    """Sample income statement payload in provider columnar shape."""
    return {
        "fields": ["ts_code", "ann_date", "end_date", "total_revenue", "n_income"],
        "items": [
            ["000001.SZ", "20240315", "20231231", "164699000000.0", "46455000000.0"],
            ["000001.SZ", "20231025", "20230930", "126634000000.0", "39635000000.0"],
        ],
    }


@pytest.fixture
def fake_client_factory():
    """Factory for FakeProviderClient instances."""
    return FakeProviderClient


@pytest.fixture
def make_wire_response():
    """Factory for columnar WireResponse objects."""
    return wire_response
