"""Chart data shaping and drill-down routing for the dashboard."""

from .drilldown import ChartEvent, ChartKind, DrillDownRouter
from .normalizers import DERIVED_SERIES, NORMALIZERS, normalize

__all__ = ["ChartEvent", "ChartKind", "DrillDownRouter", "DERIVED_SERIES", "NORMALIZERS", "normalize"]
