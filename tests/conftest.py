# tests/conftest.py
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Make sure `src/` is on the import path:
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
sys.path.insert(0, os.path.join(ROOT, "src"))

from api.dashboard_client import DashboardClient  # noqa: E402


class FakeSession:
    """Stand-in for ``aiohttp.ClientSession`` used as an async context manager."""

    def __init__(self):
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


@pytest.fixture
def mock_client():
    """DashboardClient with every network method replaced by an AsyncMock."""
    client = MagicMock(spec=DashboardClient)
    client.open_session.side_effect = lambda: FakeSession()
    client.fetch_chart = AsyncMock()
    client.fetch_shortlist = AsyncMock()
    client.upload_file = AsyncMock()
    return client


@pytest.fixture
def shortlist_payload():
    """Second page of a 40-row shortlist at 25 rows per page."""
    rows = [
        {
            "score": 90 - i,
            "tier": "high",
            "county": "Fulton",
            "case_no": f"2024-ES-{i:04d}",
            "owner_name": f"Estate {i}",
            "property_address": f"{i} Main St",
            "city": "Atlanta",
            "property_value_2025": 200000 + i,
            "petition_date": "2024-03-01",
            "absentee_flag": True,
            "parcel_number": f"P-{i}",
            "qpublic_report_url": None,
            "rationale": "absentee owner",
        }
        for i in range(15)
    ]
    return {
        "rows": rows,
        "meta": {"total": 40, "page": 2, "page_size": 25, "total_pages": 2, "has_next": False, "has_prev": True},
    }


@pytest.fixture
def kpi_payload():
    """KPI payload wrapped in a single-element list, as the API sometimes sends it."""
    return [
        {
            "kpis": [
                {"label": "Records", "value": 1234},
                {"label": "Absentee %", "value": 0.61, "hint": "of filtered records"},
                {"label": "Median Value", "value": 248000},
            ]
        }
    ]
