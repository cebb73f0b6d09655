"""Chart configuration, color schemes and bucket tables."""

from typing import Dict, Optional, Tuple


class ChartConfig:
    """Chart styling and configuration."""

    # Color schemes
    PALETTE = {
        "high": "#4F46E5",
        "med": "#F59E0B",
        "low": "#9CA3AF",
        "absentee": "#10B981",
        "local": "#6366F1",
        "accent": "#06B6D4",
        "success": "#22C55E",
        "purple": "#8B5CF6",
    }

    CLASS_MIX_COLORS = ["#4F46E5", "#F59E0B", "#10B981", "#8B5CF6", "#EC4899"]

    TIER_ORDER = ("low", "med", "high")

    # Reference thresholds drawn on the charts
    THRESHOLDS = {
        "buybox_value_min": 150000,
        "buybox_value_max": 450000,
    }

    # Value histogram buckets, in display order: label -> (min, max); None = open-ended
    VALUE_BUCKETS: Tuple[Tuple[str, Tuple[int, Optional[int]]], ...] = (
        ("<100k", (0, 100000)),
        ("100–250k", (100000, 250000)),
        ("250–500k", (250000, 500000)),
        ("500k–1M", (500000, 1000000)),
        ("1M+", (1000000, None)),
    )

    # The average-value series keeps its historical "median" title
    CHART_TITLES = {
        "filings-by-month-tiered": "Lead Tiers Over Time",
        "absentee_stack": "Absentee vs Local Over Time",
        "property-class-mix": "Property Class Mix",
        "count-by-county": "Absentee vs Local by County",
        "average-value-by-county": "Median Value by County (buy-box band)",
        "binned-days-since-petition": "Days Since Petition (buckets)",
        "binned-days-petition-to-death": "Death → Petition Delay (days)",
        "filings-by-month": "Filings by Month",
        "petition-types": "Petition Types",
        "value-histogram": "Property Value Distribution (buy-box)",
        "get-parties": "Top Parties by Holdings",
    }

    CHART_HEIGHT = 320

    @classmethod
    def get_value_bucket_range(cls, label: str) -> Optional[Tuple[int, Optional[int]]]:
        """Get the numeric range for a value histogram bucket label."""
        return dict(cls.VALUE_BUCKETS).get(label)

    @classmethod
    def get_value_bucket_order(cls) -> Dict[str, int]:
        """Get the display position of every value bucket label."""
        return {label: i for i, (label, _) in enumerate(cls.VALUE_BUCKETS)}

    @classmethod
    def get_title(cls, source_name: str) -> str:
        """Get the display title for a chart source."""
        return cls.CHART_TITLES.get(source_name, source_name)
