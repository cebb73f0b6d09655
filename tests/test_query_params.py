"""
Tests for query-string serialization.
"""

from api.query_params import filter_params, shortlist_params
from ui.state.filter_state import FilterState


class TestFilterParams:
    """Test filter serialization."""

    def test_empty(self):
        assert filter_params(FilterState()) == []
        assert filter_params(None) == []

    def test_lists_repeat_key(self):
        params = filter_params(FilterState({"counties": ["Fulton", "Cobb"]}))
        assert params == [("counties", "Fulton"), ("counties", "Cobb")]

    def test_scalars_and_flags(self):
        params = filter_params(FilterState({"has_parcel": False, "min_value": 150000, "month_from": "2024-01"}))
        assert ("has_parcel", "false") in params
        assert ("min_value", "150000") in params
        assert ("month_from", "2024-01") in params

    def test_plain_mapping(self):
        """Test anything with items() is accepted and None is skipped."""
        assert filter_params({"counties": ["A"], "tiers": None}) == [("counties", "A")]


class TestShortlistParams:
    """Test shortlist query building."""

    def test_sort_omitted_when_empty(self):
        params = shortlist_params(FilterState(), "", 1, 25)
        assert params == [("page", "1"), ("page_size", "25")]

    def test_full_query(self):
        params = shortlist_params(FilterState({"tiers": ["high"]}), "score:desc", 2, 25)
        assert params == [("tiers", "high"), ("sort", "score:desc"), ("page", "2"), ("page_size", "25")]
