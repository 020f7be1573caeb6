"""Tests for multi-category aggregation and per-category failure isolation."""

import threading
import time
from datetime import date

import pytest

from finagg_app.aggregation.orchestrator import (
    AggregationOrchestrator,
    default_date_window,
    expand_categories,
)
from finagg_app.config.defaults import AggregationParams, QueryParams
from finagg_app.data.models import AGGREGATE_ORDER, Query
from finagg_app.errors import (
    ConfigurationError,
    MalformedPayloadError,
    NoDataError,
    ProtocolError,
    TransportError,
)

TODAY = date(2024, 6, 15)

ALL_API_NAMES = ["income", "balancesheet", "cashflow", "forecast", "express", "fina_indicator", "dividend"]


@pytest.fixture
def full_responses(make_wire_response):
    """One row of data for every aggregate endpoint."""
    return {
        api_name: make_wire_response(["ts_code", "end_date"], [["000001.SZ", "20231231"]])
        for api_name in ALL_API_NAMES
    }


@pytest.fixture(params=[True, False], ids=["parallel", "sequential"])
def aggregation_params(request) -> AggregationParams:
    return AggregationParams(parallel=request.param)


class TestCategoryExpansion:

    def test_all_expands_in_fixed_order(self):
        assert expand_categories("all") == [
            "income", "balance", "cashflow", "forecast", "express", "indicators", "dividend"
        ]

    def test_single_category(self):
        assert expand_categories("dividend") == ["dividend"]

    def test_empty_selector(self):
        assert expand_categories("") == []

    def test_default_window(self):
        assert default_date_window(TODAY) == ("20220101", "20241231")
        assert default_date_window(TODAY, lookback_years=0) == ("20240101", "20241231")


class TestAggregationOrchestrator:

    def test_all_categories_succeed(self, fake_client_factory, full_responses, aggregation_params):
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client, aggregation_params=aggregation_params)

        outcomes = orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        assert [o.category for o in outcomes] == list(AGGREGATE_ORDER)
        assert all(o.succeeded and len(o.records) == 1 for o in outcomes)
        assert len(client.calls) == 7

    def test_balance_code_error_isolated(self, fake_client_factory, full_responses, aggregation_params):
        """Test a provider error on one category leaves the other six intact."""
        full_responses["balancesheet"] = ProtocolError(
            "Provider error: no permission", provider_code=40203, provider_message="no permission"
        )
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client, aggregation_params=aggregation_params)

        outcomes = orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        assert len(outcomes) == 7
        by_category = {o.category: o for o in outcomes}
        assert by_category["income"].succeeded
        assert by_category["income"].records[0]["ts_code"] == "000001.SZ"
        assert not by_category["balance"].succeeded
        assert "no permission" in by_category["balance"].error
        assert by_category["balance"].records is None
        for name in ("cashflow", "forecast", "express", "indicators", "dividend"):
            assert by_category[name].succeeded

    @pytest.mark.parametrize("error", [
        TransportError("Provider request timed out after 30s"),
        MalformedPayloadError("Row 0 has 1 values for 2 fields"),
        RuntimeError("unexpected"),
    ])
    def test_any_job_error_becomes_failure(self, fake_client_factory, full_responses, error):
        full_responses["forecast"] = error
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client)

        outcomes = orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        forecast = outcomes[AGGREGATE_ORDER.index("forecast")]
        assert forecast.error == str(error)
        assert sum(1 for o in outcomes if o.succeeded) == 6

    def test_empty_category_is_success(self, fake_client_factory, full_responses, make_wire_response):
        """Test 'no data' is reported as success with zero records, not failure."""
        full_responses["dividend"] = make_wire_response(["ts_code"], [])
        orchestrator = AggregationOrchestrator(fake_client_factory(full_responses))

        outcomes = orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        dividend = outcomes[-1]
        assert dividend.succeeded
        assert dividend.records == ()
        assert not dividend.has_records

    def test_order_independent_of_completion(self, make_wire_response):
        """Test outcomes follow expansion order even when early jobs finish last."""
        delays = {"income": 0.2, "balancesheet": 0.15, "cashflow": 0.1}
        finished = []
        lock = threading.Lock()

        class SlowClient:
            def ensure_configured(self):
                pass

            def execute(self, api_name, params, fields=None):
                time.sleep(delays.get(api_name, 0.0))
                with lock:
                    finished.append(api_name)
                return make_wire_response(["ts_code"], [["000001.SZ"]])

        orchestrator = AggregationOrchestrator(SlowClient(), aggregation_params=AggregationParams(parallel=True))
        outcomes = orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        assert [o.category for o in outcomes] == list(AGGREGATE_ORDER)
        assert finished[-1] == "income"

    def test_shared_default_window(self, fake_client_factory, full_responses):
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client)

        orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        for call in client.calls:
            assert call["params"]["start_date"] == "20220101"
            assert call["params"]["end_date"] == "20241231"

    def test_income_period_scenario(self, fake_client_factory, full_responses):
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client)

        orchestrator.run(Query(identifier="000001.SZ", category="income", period="20231231"), today=TODAY)

        params = client.params_for("income")
        assert params["period"] == "20231231"
        assert "start_date" not in params
        assert "end_date" not in params

    def test_lookback_years_configurable(self, fake_client_factory, full_responses):
        client = fake_client_factory(full_responses)
        orchestrator = AggregationOrchestrator(client, query_params=QueryParams(lookback_years=5))

        orchestrator.run(Query(identifier="000001.SZ", category="dividend"), today=TODAY)

        assert client.params_for("dividend")["start_date"] == "20190101"

    def test_default_fields_sent(self, fake_client_factory, full_responses):
        client = fake_client_factory(full_responses)
        AggregationOrchestrator(client).run(Query(identifier="000001.SZ", category="forecast"), today=TODAY)

        assert client.calls[0]["fields"].startswith("ts_code,ann_date,end_date,type")

    def test_missing_token_aborts_before_fetch(self, fake_client_factory, full_responses):
        client = fake_client_factory(full_responses, token=None)
        orchestrator = AggregationOrchestrator(client)

        with pytest.raises(ConfigurationError):
            orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

        assert client.calls == []

    def test_configuration_error_in_job_propagates(self, fake_client_factory, full_responses):
        full_responses["cashflow"] = ConfigurationError("token revoked", setting="token")
        orchestrator = AggregationOrchestrator(fake_client_factory(full_responses))

        with pytest.raises(ConfigurationError):
            orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

    def test_unrecoverable_error_in_job_propagates(self, fake_client_factory, full_responses):
        error = ProtocolError("Provider error: account suspended")
        error.recoverable = False
        full_responses["express"] = error
        orchestrator = AggregationOrchestrator(fake_client_factory(full_responses))

        with pytest.raises(ProtocolError, match="account suspended"):
            orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

    def test_unsupported_category_is_failure_then_no_data(self, fake_client_factory):
        orchestrator = AggregationOrchestrator(fake_client_factory())

        with pytest.raises(NoDataError) as exc_info:
            orchestrator.run(Query(identifier="000001.SZ", category="segments"), today=TODAY)

        outcomes = exc_info.value.outcomes
        assert len(outcomes) == 1
        assert "Unsupported category" in outcomes[0].error

    def test_all_failed_raises_no_data(self, fake_client_factory, aggregation_params):
        responses = {name: TransportError("down") for name in ALL_API_NAMES}
        orchestrator = AggregationOrchestrator(fake_client_factory(responses),
                                               aggregation_params=aggregation_params)

        with pytest.raises(NoDataError) as exc_info:
            orchestrator.run(Query(identifier="600519.SH", category="all"), today=TODAY)

        assert exc_info.value.identifier == "600519.SH"
        assert "600519.SH" in str(exc_info.value)
        assert len(exc_info.value.outcomes) == 7
        assert all(not o.succeeded for o in exc_info.value.outcomes)

    def test_all_empty_raises_no_data(self, fake_client_factory):
        orchestrator = AggregationOrchestrator(fake_client_factory())

        with pytest.raises(NoDataError):
            orchestrator.run(Query(identifier="000001.SZ", category="all"), today=TODAY)

    def test_empty_selector_rejected(self, fake_client_factory):
        orchestrator = AggregationOrchestrator(fake_client_factory())
        query = Query(identifier="000001.SZ", category="")

        with pytest.raises(ValueError):
            orchestrator.run(query, today=TODAY)


class TestFetchSingle:

    def test_hk_statement(self, fake_client_factory, make_wire_response):
        responses = {"hk_income": make_wire_response(
            ["ts_code", "end_date", "ind_name", "ind_value"],
            [["00700.HK", "20231231", "Revenue", 609015000000.0]],
        )}
        client = fake_client_factory(responses)
        orchestrator = AggregationOrchestrator(client)

        category, records = orchestrator.fetch_single(
            Query(identifier="00700.HK", category="hk_income", item_name="Revenue"), today=TODAY
        )

        assert category == "hk_income"
        assert records[0]["ind_value"] == 609015000000.0
        assert client.params_for("hk_income") == {
            "ts_code": "00700.HK",
            "start_date": "20220101",
            "end_date": "20241231",
            "ind_name": "Revenue",
        }
        assert client.calls[0]["fields"] is None

    def test_errors_propagate(self, fake_client_factory):
        client = fake_client_factory({"hk_cashflow": ProtocolError("Provider error: bad code")})

        with pytest.raises(ProtocolError):
            AggregationOrchestrator(client).fetch_single(
                Query(identifier="00700.HK", category="hk_cashflow"), today=TODAY
            )

    def test_all_not_allowed(self, fake_client_factory):
        with pytest.raises(ValueError):
            AggregationOrchestrator(fake_client_factory()).fetch_single(
                Query(identifier="00700.HK", category="all")
            )
