"""Typed contracts for dashboard data-source state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from api.error_handling import ErrorCategory


@dataclass(frozen=True)
class PageMeta:
    """Server-reported paging metadata; displayed, never recomputed."""

    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PageMeta":
        """Build from the ``meta`` object of a shortlist response."""
        return cls(
            total=int(payload.get("total", 0) or 0),
            page=int(payload.get("page", 1) or 1),
            page_size=int(payload.get("page_size", 0) or 0),
            total_pages=int(payload.get("total_pages", 0) or 0),
            has_next=bool(payload.get("has_next", False)),
            has_prev=bool(payload.get("has_prev", False)),
        )

    @property
    def first_row(self) -> int:
        return (self.page - 1) * self.page_size + 1

    @property
    def last_row(self) -> int:
        return min(self.page * self.page_size, self.total)

    def summary(self) -> str:
        """Pager caption, e.g. ``Showing 26–40 of 40``."""
        if not self.total:
            return "No results"
        return f"Showing {self.first_row}–{self.last_row} of {self.total}"


@dataclass(frozen=True)
class SourceError:
    """Source-local failure shown next to the affected chart."""

    category: ErrorCategory
    message: str


@dataclass(frozen=True)
class SourceState:
    """Last known state of one data source."""

    name: str
    data: Any = None
    loading: bool = False
    error: Optional[SourceError] = None
    generation: int = 0

    @property
    def has_data(self) -> bool:
        return self.data is not None
