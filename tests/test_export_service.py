"""
Tests for the shortlist CSV export.
"""

import asyncio
import csv
import io
from datetime import datetime
from unittest.mock import AsyncMock, Mock, patch

import aiohttp
import pytest

from api.error_handling import ErrorCategory, ExportError
from config.table_config import EXPORT_COLUMNS
from ui.services.export_service import (
    ExportService,
    _backoff_handler,
    _module_logger,
    export_filename,
    rows_to_csv,
)
from ui.state.filter_state import FilterState


@pytest.fixture
def no_sleep():
    """Skip backoff waits."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


class TestRowsToCsv:
    """Test CSV serialization."""

    def test_header_and_column_order(self):
        """Test the header follows the export column list, not the row keys."""
        text = rows_to_csv([{"rationale": "why", "case_no": "2024-ES-1", "extra": "dropped"}])
        reader = csv.reader(io.StringIO(text))
        header = next(reader)
        row = next(reader)

        assert header == EXPORT_COLUMNS
        assert row[EXPORT_COLUMNS.index("case_no")] == "2024-ES-1"
        assert row[EXPORT_COLUMNS.index("rationale")] == "why"
        assert "dropped" not in text

    def test_every_field_quoted(self):
        text = rows_to_csv([{"a": 'say "hi", then', "b": None}], columns=["a", "b"])
        assert text.splitlines() == ['"a","b"', '"say ""hi"", then",""']

    def test_empty_rows_write_header(self):
        assert rows_to_csv([], columns=["a", "b"]) == '"a","b"\n'

    def test_filename(self):
        assert export_filename(datetime(2024, 3, 5, 14, 7, 9)) == "shortlist_export_20240305_140709.csv"


class TestExportService:
    """Test the unpaginated export fetch."""

    @pytest.mark.asyncio
    async def test_single_request_with_export_cap(self, mock_client, shortlist_payload):
        mock_client.fetch_shortlist.return_value = shortlist_payload
        service = ExportService(mock_client, logger_obj=Mock())
        filters = FilterState({"tiers": ["high"]})

        result = await service.export(filters, "score:desc")

        mock_client.fetch_shortlist.assert_awaited_once()
        call = mock_client.fetch_shortlist.call_args
        assert call.args[1:3] == (filters, "score:desc")
        assert call.kwargs == {"page": 1, "page_size": 10000}
        assert result.row_count == 15
        assert result.content.decode("utf-8").count("\n") == 16

    @pytest.mark.asyncio
    async def test_truncated_export(self, mock_client, shortlist_payload):
        """Test a total above the returned rows is reported as truncated."""
        mock_client.fetch_shortlist.return_value = shortlist_payload
        result = await ExportService(mock_client, logger_obj=Mock()).export(FilterState())

        assert result.total == 40
        assert result.truncated is True

    @pytest.mark.asyncio
    async def test_retries_connection_errors(self, mock_client, no_sleep):
        mock_client.fetch_shortlist.side_effect = [
            aiohttp.ClientConnectionError("reset"),
            {"rows": [{"case_no": "1"}], "meta": {"total": 1}},
        ]

        result = await ExportService(mock_client, logger_obj=Mock()).export(FilterState())

        assert result.row_count == 1
        assert mock_client.fetch_shortlist.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_tries(self, mock_client, no_sleep):
        mock_client.fetch_shortlist.side_effect = asyncio.TimeoutError()

        with pytest.raises(ExportError) as excinfo:
            await ExportService(mock_client, logger_obj=Mock()).export(FilterState())

        assert excinfo.value.category is ErrorCategory.TIMEOUT
        assert mock_client.fetch_shortlist.await_count == 3

    @pytest.mark.asyncio
    async def test_http_errors_not_retried(self, mock_client, no_sleep):
        mock_client.fetch_shortlist.side_effect = aiohttp.ClientResponseError(Mock(), (), status=500)

        with pytest.raises(ExportError) as excinfo:
            await ExportService(mock_client, logger_obj=Mock()).export(FilterState())

        assert excinfo.value.category is ErrorCategory.SERVER
        assert mock_client.fetch_shortlist.await_count == 1


class TestBackoffHandler:
    """Test the backoff handler behavior."""

    def test_backoff_handler_logs_category(self):
        with patch.object(_module_logger, "warning") as mock_warning:
            _backoff_handler({"exception": aiohttp.ClientConnectionError("down"), "wait": 2.0, "tries": 1})

            message = mock_warning.call_args[0][0]
            assert "Backing off 2.0s" in message
            assert "network" in message
            assert "attempt 1/3" in message
