"""
Tests for drill-down routing from chart events to filter changes.
"""
from unittest.mock import Mock

import pytest

from ui.charts.drilldown import ChartEvent, ChartKind, DrillDownRouter, parse_range_label
from ui.state.filter_state import FilterState


@pytest.fixture
def router():
    return DrillDownRouter(logger_obj=Mock())


class TestParseRangeLabel:
    """Test histogram bucket label parsing."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("181–365", (181, 365)),
            ("0-30", (0, 30)),
            ("1,000–2,000", (1000, 2000)),
            ("365+", (365, None)),
            (">365", (365, None)),
            ("unknown", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, label, expected):
        assert parse_range_label(label) == expected


class TestDrillDownRouter:
    """Test each chart kind's filter patch."""

    def test_county_bar(self, router):
        """Test clicking a county sets the county list to that county."""
        filters = router.route(ChartEvent(ChartKind.COUNTY_BAR, "Fulton"), FilterState({"counties": ["Cobb"]}))
        assert filters.get("counties") == ("Fulton",)

    def test_month_series(self, router):
        """Test clicking a month narrows to that single month."""
        filters = router.route(ChartEvent(ChartKind.MONTH_SERIES, "2024-03"), FilterState())
        assert filters.get("month_from") == "2024-03"
        assert filters.get("month_to") == "2024-03"

    def test_value_bucket(self, router):
        """Test a value bucket sets the min/max range."""
        filters = router.route(ChartEvent(ChartKind.VALUE_BUCKET, "100–250k"), FilterState())
        assert filters.get("min_value") == 100000
        assert filters.get("max_value") == 250000

    def test_open_value_bucket_clears_max(self, router):
        """Test the open-ended bucket removes any previous max."""
        start = FilterState({"max_value": 250000})
        filters = router.route(ChartEvent(ChartKind.VALUE_BUCKET, "1M+"), start)
        assert filters.get("min_value") == 1000000
        assert "max_value" not in filters

    def test_days_since_petition_bucket(self, router):
        filters = router.route(ChartEvent(ChartKind.DAYS_SINCE_PETITION_BUCKET, "181–365"), FilterState())
        assert filters.get("days_since_petition_min") == 181
        assert filters.get("days_since_petition_max") == 365

    def test_open_days_bucket(self, router):
        filters = router.route(ChartEvent(ChartKind.DAYS_DEATH_TO_PETITION_BUCKET, "365+"), FilterState())
        assert filters.get("days_death_to_petition_min") == 365
        assert "days_death_to_petition_max" not in filters

    def test_class_mix_by_index(self, router):
        """Test a class-mix bar index resolves through the current series."""
        mix = [{"property_class": "Residential", "count": 5}, {"property_class": "Agricultural", "count": 2}]
        filters = router.route(ChartEvent(ChartKind.CLASS_MIX, index=1), FilterState(), mix)
        assert filters.get("property_class") == "Agricultural"

    def test_absentee_only(self, router):
        filters = router.route(ChartEvent(ChartKind.ABSENTEE_ONLY), FilterState())
        assert filters.get("absentee_only") is True

    @pytest.mark.parametrize(
        "event",
        [
            ChartEvent(ChartKind.DAYS_SINCE_PETITION_BUCKET, "unknown"),
            ChartEvent(ChartKind.VALUE_BUCKET, "2M–3M"),
            ChartEvent(ChartKind.MONTH_SERIES, "March"),
            ChartEvent(ChartKind.CLASS_MIX, index=9),
            ChartEvent(ChartKind.COUNTY_BAR, ""),
        ],
    )
    def test_unmappable_events_leave_filters_unchanged(self, router, event):
        """Test unparsable labels return the same filter object."""
        filters = FilterState({"tiers": ["high"]})
        assert router.route(event, filters) is filters
