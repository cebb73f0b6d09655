"""
Shortlist export to CSV.

This module provides the ExportService class, which re-issues the current
shortlist query without pagination and serializes every returned row with a
fixed column order.
"""

import asyncio
import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp
import backoff
import pandas as pd

from api.dashboard_client import DashboardClient
from api.error_handling import ExportError, categorize_error
from config.api import APIConfig
from config.settings import Settings
from config.table_config import EXPORT_COLUMNS
from ui.charts.normalizers import normalize_shortlist

_module_logger = logging.getLogger(__name__)


def _backoff_handler(details):
    """Log export retry attempts with error categorization."""
    exception = details["exception"]
    error_category = categorize_error(exception)
    _module_logger.warning(
        f"Backing off {details['wait']:.1f}s after {error_category.value} error "
        f"(attempt {details['tries']}/{APIConfig.EXPORT_MAX_TRIES}): {exception}"
    )


@dataclass(frozen=True)
class ExportResult:
    """A ready-to-download CSV export."""

    filename: str
    content: bytes
    row_count: int
    total: int

    @property
    def truncated(self) -> bool:
        """True when the server holds more rows than the export cap returned."""
        return self.total > self.row_count


def rows_to_csv(rows: List[Dict[str, Any]], columns: Optional[List[str]] = None) -> str:
    """Serialize rows with a fixed column order, quoting every field.

    Args:
        rows: Shortlist rows as returned by the API
        columns: Column order; defaults to ``EXPORT_COLUMNS``

    Returns:
        CSV text including the header row
    """
    columns = columns or EXPORT_COLUMNS
    df = pd.DataFrame(rows).reindex(columns=columns)
    df = df.astype(object).where(df.notna(), "")
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def export_filename(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{Settings.EXPORT_FILENAME_PREFIX}_{stamp}.csv"


class ExportService:
    """Builds unpaginated shortlist exports."""

    def __init__(
        self,
        client: DashboardClient,
        page_size_cap: int = APIConfig.EXPORT_PAGE_SIZE,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.page_size_cap = page_size_cap
        self.logger = logger_obj or logging.getLogger(__name__)

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientConnectionError, asyncio.TimeoutError),
        max_tries=APIConfig.EXPORT_MAX_TRIES,
        on_backoff=_backoff_handler,
        jitter=backoff.full_jitter,
        base=APIConfig.RETRY_BASE_DELAY,
        max_value=APIConfig.RETRY_MAX_DELAY,
    )
    async def fetch_all_rows(self, filters: Any, sort: Optional[str]) -> Dict[str, Any]:
        """Fetch page 1 with the export cap as page size."""
        async with self.client.open_session() as session:
            raw = await self.client.fetch_shortlist(session, filters, sort, page=1, page_size=self.page_size_cap)
        return normalize_shortlist(raw)

    async def export(self, filters: Any, sort: Optional[str] = None) -> ExportResult:
        """Fetch the full filtered+sorted shortlist and render it as CSV.

        Raises:
            ExportError: if the fetch or serialization fails.
        """
        try:
            shortlist = await self.fetch_all_rows(filters, sort)
            rows = shortlist["rows"]
            content = rows_to_csv(rows).encode("utf-8")
        except Exception as e:
            self.logger.error(f"Export failed: {e}", exc_info=True)
            raise ExportError.from_exception(e, "Export failed") from e

        total = max(shortlist["meta"].total, len(rows))
        if total > len(rows):
            self.logger.warning(f"Export truncated to {len(rows):,} of {total:,} rows")
        self.logger.info(f"Exported {len(rows):,} rows")
        return ExportResult(filename=export_filename(), content=content, row_count=len(rows), total=total)
