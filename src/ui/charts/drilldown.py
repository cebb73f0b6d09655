"""Drill-down routing from chart interactions to filter patches.

Charts emit a single typed ``ChartEvent``; the router maps it to a patch
(key -> value, ``None`` clears the key) and applies it through
``FilterState``. Labels that cannot be mapped yield an empty patch and
leave the filter unchanged.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config.charts import ChartConfig
from ui.state.filter_state import FilterState

Patch = Dict[str, Any]

_RANGE_RE = re.compile(r"^\s*(\d[\d,]*)\s*[–—-]\s*(\d[\d,]*)\s*$")
_OPEN_RE = re.compile(r"^\s*(?:>\s*(\d[\d,]*)|(\d[\d,]*)\s*\+)\s*$")
_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class ChartKind(Enum):
    """Interactive chart types (plus the absentee-only quick action)."""

    COUNTY_BAR = "county_bar"
    MONTH_SERIES = "month_series"
    PETITION_TYPE_BAR = "petition_type_bar"
    VALUE_BUCKET = "value_bucket"
    CLASS_MIX = "class_mix"
    DAYS_SINCE_PETITION_BUCKET = "days_since_petition_bucket"
    DAYS_DEATH_TO_PETITION_BUCKET = "days_death_to_petition_bucket"
    ABSENTEE_ONLY = "absentee_only"


@dataclass(frozen=True)
class ChartEvent:
    """A click on a chart element."""

    kind: ChartKind
    label: Optional[str] = None
    index: Optional[int] = None


# Numeric-range histograms: kind -> (min key, max key)
RANGE_BUCKET_KEYS: Dict[ChartKind, Tuple[str, str]] = {
    ChartKind.DAYS_SINCE_PETITION_BUCKET: ("days_since_petition_min", "days_since_petition_max"),
    ChartKind.DAYS_DEATH_TO_PETITION_BUCKET: ("days_death_to_petition_min", "days_death_to_petition_max"),
}


def parse_range_label(label: Optional[str]) -> Optional[Tuple[int, Optional[int]]]:
    """Parse ``"181–365"`` -> (181, 365) and ``"365+"`` / ``">365"`` -> (365, None).

    Returns None for anything else.
    """
    if not label:
        return None
    match = _RANGE_RE.match(label)
    if match:
        return int(match.group(1).replace(",", "")), int(match.group(2).replace(",", ""))
    match = _OPEN_RE.match(label)
    if match:
        return int((match.group(1) or match.group(2)).replace(",", "")), None
    return None


class DrillDownRouter:
    """Maps chart events to filter patches."""

    def __init__(self, logger_obj: Optional[logging.Logger] = None):
        self.logger = logger_obj or logging.getLogger(__name__)

    def patch_for(self, event: ChartEvent, class_mix: Optional[List[Mapping[str, Any]]] = None) -> Patch:
        """Build the filter patch for ``event``; empty when it cannot be mapped.

        Args:
            event: The chart interaction
            class_mix: Current normalized property-class-mix series, used to
                resolve a clicked slice index

        Returns:
            Filter key -> value, where None clears the key
        """
        label = (event.label or "").strip()
        kind = event.kind

        if kind is ChartKind.ABSENTEE_ONLY:
            return {"absentee_only": True}
        if kind is ChartKind.COUNTY_BAR and label:
            return {"counties": [label]}
        if kind is ChartKind.PETITION_TYPE_BAR and label:
            return {"petition_types": [label]}
        if kind is ChartKind.MONTH_SERIES and _MONTH_RE.match(label):
            return {"month_from": label, "month_to": label}
        if kind is ChartKind.VALUE_BUCKET:
            bucket = ChartConfig.get_value_bucket_range(label)
            if bucket is not None:
                return {"min_value": bucket[0], "max_value": bucket[1]}
        if kind is ChartKind.CLASS_MIX:
            rows = class_mix or []
            if event.index is not None and 0 <= event.index < len(rows):
                property_class = rows[event.index].get("property_class")
                if property_class:
                    return {"property_class": property_class}
        if kind in RANGE_BUCKET_KEYS:
            parsed = parse_range_label(label)
            if parsed is not None:
                min_key, max_key = RANGE_BUCKET_KEYS[kind]
                return {min_key: parsed[0], max_key: parsed[1]}

        self.logger.debug("Ignoring %s event with label=%r index=%r", kind.value, event.label, event.index)
        return {}

    def route(
        self,
        event: ChartEvent,
        filters: FilterState,
        class_mix: Optional[List[Mapping[str, Any]]] = None,
    ) -> FilterState:
        """Apply the event's patch to ``filters``; returns ``filters`` itself when ignored."""
        patch = self.patch_for(event, class_mix)
        if not patch:
            return filters
        return filters.apply_patch(patch)
