"""
Tests for DataSourceOrchestrator dispatch bookkeeping.

Tests cover:
- Applying responses and normalizing them
- Discarding stale responses
- Per-source failure isolation
- Keeping previous data on error
"""

import asyncio
from unittest.mock import Mock

import aiohttp
import pytest

from api.error_handling import ErrorCategory
from ui.services.data_sources import CHART_SOURCES, DATA_SOURCES, DataSourceOrchestrator
from ui.state.filter_state import FilterState


@pytest.fixture
def orchestrator(mock_client):
    return DataSourceOrchestrator(mock_client, logger_obj=Mock())


class TestOrchestratorInit:
    """Test source registration."""

    def test_all_sources_registered(self, orchestrator):
        assert orchestrator.source_names == DATA_SOURCES
        assert "kpis" not in CHART_SOURCES and "shortlist" not in CHART_SOURCES

    def test_unknown_source_rejected(self, mock_client):
        with pytest.raises(ValueError):
            DataSourceOrchestrator(mock_client, source_names=["kpis", "bogus"])

    def test_initial_state(self, orchestrator):
        state = orchestrator.snapshot("kpis")
        assert state.data is None and not state.loading and state.error is None
        assert orchestrator.data("kpis", []) == []


class TestDispatch:
    """Test single and batch dispatch."""

    @pytest.mark.asyncio
    async def test_dispatch_applies_normalized_data(self, orchestrator, mock_client, kpi_payload):
        mock_client.fetch_chart.return_value = kpi_payload

        applied = await orchestrator.dispatch("kpis", FilterState())

        assert applied is True
        assert orchestrator.data("kpis")[1]["value"] == "61%"
        assert not orchestrator.snapshot("kpis").loading

    @pytest.mark.asyncio
    async def test_shortlist_uses_sort_and_page(self, orchestrator, mock_client, shortlist_payload):
        mock_client.fetch_shortlist.return_value = shortlist_payload
        filters = FilterState({"tiers": ["high"]})

        await orchestrator.dispatch("shortlist", filters, "score:desc", 2)

        args = mock_client.fetch_shortlist.call_args[0]
        assert args[1:] == (filters, "score:desc", 2, 25)
        assert orchestrator.data("shortlist")["meta"].page == 2

    @pytest.mark.asyncio
    async def test_dispatch_all_shares_one_session(self, orchestrator, mock_client):
        mock_client.fetch_chart.return_value = {}
        mock_client.fetch_shortlist.return_value = {}

        results = await orchestrator.dispatch_all(FilterState())

        assert set(results) == set(DATA_SOURCES)
        assert mock_client.open_session.call_count == 1
        assert mock_client.fetch_chart.call_count == len(DATA_SOURCES) - 1

    @pytest.mark.asyncio
    async def test_derived_absentee_stack(self, orchestrator, mock_client):
        payloads = {
            "absentee-rate-trend": {"absenteeRateTrend": [{"month": "2024-01", "rate": 0.5}]},
            "filings-by-month": {"filingsByMonth": [{"month": "2024-01", "count": 5}]},
        }
        mock_client.fetch_chart.side_effect = lambda session, name, filters: payloads[name]

        await orchestrator.dispatch_many(list(payloads), FilterState())

        assert orchestrator.derived("absentee_stack") == [{"month": "2024-01", "absentee": 3, "local": 2}]


class TestStaleness:
    """A response only applies if it belongs to the latest dispatch."""

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, orchestrator, mock_client):
        """Test an older, slower response cannot overwrite a newer one."""
        release_first = asyncio.Event()

        async def fetch(session, name, filters):
            if filters.get("counties") == ("Fulton",):
                await release_first.wait()
                return {"countByCounty": [{"county": "Fulton", "count": 1}]}
            return {"countByCounty": [{"county": "Cobb", "count": 2}]}

        mock_client.fetch_chart.side_effect = fetch

        first = asyncio.create_task(orchestrator.dispatch("count-by-county", FilterState({"counties": ["Fulton"]})))
        await asyncio.sleep(0)
        second = await orchestrator.dispatch("count-by-county", FilterState({"counties": ["Cobb"]}))
        release_first.set()
        first_applied = await first

        assert second is True
        assert first_applied is False
        assert orchestrator.data("count-by-county")[0]["county"] == "Cobb"
        assert orchestrator.snapshot("count-by-county").loading is False

    @pytest.mark.asyncio
    async def test_stale_failure_ignored(self, orchestrator, mock_client):
        """Test a superseded request's failure does not set an error."""
        release_first = asyncio.Event()

        async def fetch(session, name, filters):
            if filters.get("tiers") == ("low",):
                await release_first.wait()
                raise aiohttp.ClientConnectionError("gone")
            return {"kpis": [{"label": "Records", "value": 1}]}

        mock_client.fetch_chart.side_effect = fetch

        first = asyncio.create_task(orchestrator.dispatch("kpis", FilterState({"tiers": ["low"]})))
        await asyncio.sleep(0)
        await orchestrator.dispatch("kpis", FilterState())
        release_first.set()
        await first

        assert orchestrator.snapshot("kpis").error is None
        assert orchestrator.data("kpis")[0]["value"] == "1"


class TestFailureIsolation:
    """Failures stay local to their source."""

    @pytest.mark.asyncio
    async def test_error_keeps_previous_data(self, orchestrator, mock_client, kpi_payload):
        mock_client.fetch_chart.return_value = kpi_payload
        await orchestrator.dispatch("kpis", FilterState())

        mock_client.fetch_chart.side_effect = asyncio.TimeoutError()
        applied = await orchestrator.dispatch("kpis", FilterState({"tiers": ["high"]}))

        state = orchestrator.snapshot("kpis")
        assert applied is False
        assert state.error.category is ErrorCategory.TIMEOUT
        assert state.data[0]["label"] == "Records"
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_one_failure_does_not_affect_others(self, orchestrator, mock_client):
        async def fetch(session, name, filters):
            if name == "petition-types":
                raise aiohttp.ClientConnectionError("refused")
            return {}

        mock_client.fetch_chart.side_effect = fetch
        mock_client.fetch_shortlist.return_value = {}

        results = await orchestrator.dispatch_all(FilterState())

        assert results["petition-types"] is False
        assert all(ok for name, ok in results.items() if name != "petition-types")
        assert list(orchestrator.errors()) == ["petition-types"]
        assert orchestrator.errors()["petition-types"].category is ErrorCategory.NETWORK

    @pytest.mark.asyncio
    async def test_success_clears_error(self, orchestrator, mock_client):
        mock_client.fetch_chart.side_effect = aiohttp.ClientConnectionError("refused")
        await orchestrator.dispatch("filings-by-month", FilterState())

        mock_client.fetch_chart.side_effect = None
        mock_client.fetch_chart.return_value = {"filingsByMonth": []}
        await orchestrator.dispatch("filings-by-month", FilterState())

        assert orchestrator.snapshot("filings-by-month").error is None
