"""Multi-column sort state for the shortlist and its wire encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from config.table_config import get_backend_column, get_client_column


class SortDirection(Enum):
    """Sort direction as sent on the wire."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    """One (column, direction) entry of a sort specification."""

    column: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    """Ordered sort specification; index 0 is the primary key."""

    keys: Tuple[SortKey, ...] = ()

    def __post_init__(self):
        columns = [k.column for k in self.keys]
        if len(columns) != len(set(columns)):
            raise ValueError(f"Sort columns must be unique: {columns}")

    @property
    def is_empty(self) -> bool:
        return not self.keys

    def position(self, column: str) -> Optional[int]:
        """Zero-based priority of ``column``, or None when it is not sorted."""
        for i, key in enumerate(self.keys):
            if key.column == column:
                return i
        return None

    def direction_of(self, column: str) -> Optional[SortDirection]:
        index = self.position(column)
        return None if index is None else self.keys[index].direction

    def toggle(self, column: str) -> "SortState":
        """Advance ``column`` through absent -> asc -> desc -> absent.

        A new column is inserted as the primary key. A column already present
        keeps its priority; only its direction changes, or it is removed when
        it was descending.
        """
        index = self.position(column)
        if index is None:
            return SortState((SortKey(column, SortDirection.ASC),) + self.keys)
        if self.keys[index].direction is SortDirection.ASC:
            keys = list(self.keys)
            keys[index] = SortKey(column, SortDirection.DESC)
            return SortState(tuple(keys))
        return SortState(tuple(k for k in self.keys if k.column != column))

    def clear(self) -> "SortState":
        return SortState()

    def indicator(self, column: str) -> str:
        """Header marker such as ``▲1`` or ``▼2``; empty when unsorted."""
        index = self.position(column)
        if index is None:
            return ""
        arrow = "▲" if self.keys[index].direction is SortDirection.ASC else "▼"
        return f"{arrow}{index + 1}"


def encode_sort(state: SortState) -> str:
    """Serialize to ``backendColumn:direction`` pairs joined by commas."""
    return ",".join(f"{get_backend_column(k.column)}:{k.direction.value}" for k in state.keys)


def decode_sort(wire: Optional[str]) -> SortState:
    """Parse the wire format back into a ``SortState``.

    Raises:
        ValueError: on a malformed entry or unknown direction.
    """
    if not wire or not wire.strip():
        return SortState()
    keys = []
    for part in wire.split(","):
        column, sep, direction = part.strip().partition(":")
        if not sep or not column:
            raise ValueError(f"Malformed sort entry: {part!r}")
        keys.append(SortKey(get_client_column(column), SortDirection(direction.strip().lower())))
    return SortState(tuple(keys))
