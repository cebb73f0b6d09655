"""Immutable filter state shared by every dashboard data source.

Each mutation returns a new ``FilterState``; the previous value is never
touched, so consumers detect a change with a plain equality check and every
dependent fetch observes one consistent snapshot.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Tuple

LIST = "list"
FLAG = "flag"
SCALAR = "scalar"
NUMBER = "number"
MONTH = "month"

# Filter key -> value kind, in chip display order
FILTER_KEYS: Dict[str, str] = {
    "counties": LIST,
    "petition_types": LIST,
    "tiers": LIST,
    "absentee_only": FLAG,
    "has_parcel": FLAG,
    "has_qpublic": FLAG,
    "has_value": FLAG,
    "property_class": SCALAR,
    "min_value": NUMBER,
    "max_value": NUMBER,
    "month_from": MONTH,
    "month_to": MONTH,
    "days_since_petition_min": NUMBER,
    "days_since_petition_max": NUMBER,
    "days_death_to_petition_min": NUMBER,
    "days_death_to_petition_max": NUMBER,
}

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _coerce_number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Filter '{key}' expects a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Filter '{key}' expects a number, got {value!r}") from exc
    return int(number) if number.is_integer() else number


def _coerce(key: str, value: Any) -> Any:
    """Normalize a filter value for its key; ``None`` means the key is cleared."""
    kind = FILTER_KEYS.get(key)
    if kind is None:
        raise ValueError(f"Unknown filter key: {key}")
    if value is None:
        return None
    if kind == LIST:
        items = (value,) if isinstance(value, (str, int, float)) else tuple(value)
        items = tuple(str(v) for v in items if v is not None and str(v) != "")
        return items or None
    if kind == FLAG:
        return bool(value)
    if kind == NUMBER:
        return _coerce_number(key, value)
    if kind == MONTH:
        month = str(value).strip()
        if not _MONTH_RE.match(month):
            raise ValueError(f"Filter '{key}' expects YYYY-MM, got {value!r}")
        return month
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class FilterState:
    """Canonical filter record; absent keys impose no constraint."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {}
        for key, value in dict(self.values).items():
            coerced = _coerce(key, value)
            if coerced is not None:
                normalized[key] = coerced
        object.__setattr__(self, "values", MappingProxyType(normalized))

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.values.items())))

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def items(self) -> List[Tuple[str, Any]]:
        """Active constraints in canonical key order."""
        return [(key, self.values[key]) for key in FILTER_KEYS if key in self.values]

    def set(self, key: str, value: Any) -> "FilterState":
        """Return a new filter with ``key`` assigned (``None``/empty clears it)."""
        coerced = _coerce(key, value)
        if coerced is None:
            return self.clear(key)
        updated = dict(self.values)
        updated[key] = coerced
        return FilterState(updated)

    def clear(self, key: str) -> "FilterState":
        """Return a new filter with ``key`` absent."""
        if key not in FILTER_KEYS:
            raise ValueError(f"Unknown filter key: {key}")
        updated = {k: v for k, v in self.values.items() if k != key}
        return FilterState(updated)

    @staticmethod
    def clear_all() -> "FilterState":
        """Return the empty filter."""
        return FilterState()

    def apply_patch(self, patch: Mapping[str, Any]) -> "FilterState":
        """Fold a drill-down patch through ``set``/``clear``."""
        result = self
        for key, value in patch.items():
            result = result.clear(key) if value is None else result.set(key, value)
        return result

    def chips(self) -> List[Tuple[str, str]]:
        """(key, text) pairs for the active-filter chip row."""
        chips = []
        for key, value in self.items():
            shown = ", ".join(value) if isinstance(value, tuple) else str(value)
            chips.append((key, f"{key}: {shown}"))
        return chips

    @classmethod
    def from_pairs(cls, pairs: List[Tuple[str, str]]) -> "FilterState":
        """Build a filter from ``key=value`` pairs; list keys accumulate repeats."""
        collected: Dict[str, Any] = {}
        for key, raw in pairs:
            kind = FILTER_KEYS.get(key)
            if kind == LIST:
                collected.setdefault(key, []).append(raw)
            elif kind == FLAG:
                collected[key] = str(raw).strip().lower() in ("1", "true", "yes", "on")
            else:
                collected[key] = raw
        return cls(collected)
