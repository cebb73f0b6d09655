"""Central dashboard state and the re-dispatch rules that keep it consistent."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from api.dashboard_client import DashboardClient
from api.error_handling import UploadError
from ui.charts.drilldown import ChartEvent, DrillDownRouter
from ui.services.data_sources import SHORTLIST_SOURCE, DataSourceOrchestrator
from ui.services.export_service import ExportResult, ExportService
from ui.state.filter_state import FilterState
from ui.state.pagination import PaginationController
from ui.state.sort_state import SortState, encode_sort
from ui.state.state_contracts import PageMeta


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a file upload, shown to the user as one message."""

    ok: bool
    message: str


class DashboardController:
    """Owns the filter, sort and page state and every source that depends on it.

    Filter changes reset the page and re-dispatch every source. Sort changes
    reset the page and re-dispatch the shortlist only. Page changes
    re-dispatch the shortlist only.
    """

    def __init__(
        self,
        client: Optional[DashboardClient] = None,
        orchestrator: Optional[DataSourceOrchestrator] = None,
        pagination: Optional[PaginationController] = None,
        router: Optional[DrillDownRouter] = None,
        export_service: Optional[ExportService] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.logger = logger_obj or logging.getLogger(__name__)
        self.client = client or DashboardClient(logger_obj=self.logger)
        self.pagination = pagination or PaginationController(logger_obj=self.logger)
        self.orchestrator = orchestrator or DataSourceOrchestrator(
            self.client, page_size=self.pagination.page_size, logger_obj=self.logger
        )
        self.router = router or DrillDownRouter(logger_obj=self.logger)
        self.export_service = export_service or ExportService(self.client, logger_obj=self.logger)
        self.filters = FilterState()
        self.sort = SortState()

    # ---------- derived views ----------

    @property
    def sort_param(self) -> str:
        return encode_sort(self.sort)

    @property
    def page_meta(self) -> Optional[PageMeta]:
        shortlist = self.orchestrator.data(SHORTLIST_SOURCE)
        return shortlist["meta"] if shortlist else None

    @property
    def shortlist_rows(self) -> List[Dict[str, Any]]:
        shortlist = self.orchestrator.data(SHORTLIST_SOURCE)
        return shortlist["rows"] if shortlist else []

    # ---------- dispatch ----------

    async def refresh_all(self) -> Dict[str, bool]:
        """Re-dispatch every source for the current state."""
        return await self.orchestrator.dispatch_all(self.filters, self.sort_param, self.pagination.page)

    async def _refresh_shortlist(self) -> bool:
        return await self.orchestrator.dispatch(
            SHORTLIST_SOURCE, self.filters, self.sort_param, self.pagination.page
        )

    # ---------- filter mutations ----------

    async def _replace_filters(self, filters: FilterState) -> bool:
        if filters == self.filters:
            return False
        self.logger.info(f"Filters changed: {dict(filters.items())}")
        self.filters = filters
        self.pagination.reset()
        await self.refresh_all()
        return True

    async def set_filter(self, key: str, value: Any) -> bool:
        return await self._replace_filters(self.filters.set(key, value))

    async def clear_filter(self, key: str) -> bool:
        return await self._replace_filters(self.filters.clear(key))

    async def clear_all_filters(self) -> bool:
        return await self._replace_filters(FilterState.clear_all())

    async def apply_filter_patch(self, patch: Mapping[str, Any]) -> bool:
        return await self._replace_filters(self.filters.apply_patch(patch))

    async def handle_chart_event(self, event: ChartEvent) -> bool:
        """Route a chart click into a filter change; ignored clicks change nothing."""
        class_mix = self.orchestrator.data("property-class-mix", [])
        return await self._replace_filters(self.router.route(event, self.filters, class_mix))

    # ---------- sort and paging ----------

    async def toggle_sort(self, column: str) -> bool:
        self.sort = self.sort.toggle(column)
        self.pagination.reset()
        return await self._refresh_shortlist()

    async def clear_sort(self) -> bool:
        """Drop every sort key; nothing is fetched when there was no sort."""
        if self.sort.is_empty:
            return False
        self.sort = self.sort.clear()
        self.pagination.reset()
        return await self._refresh_shortlist()

    async def next_page(self) -> bool:
        if not self.pagination.next_page(self.page_meta):
            return False
        return await self._refresh_shortlist()

    async def previous_page(self) -> bool:
        if not self.pagination.previous_page(self.page_meta):
            return False
        return await self._refresh_shortlist()

    async def go_to_page(self, page: int) -> bool:
        if not self.pagination.go_to(page, self.page_meta):
            return False
        return await self._refresh_shortlist()

    # ---------- upload and export ----------

    async def upload(self, filename: str, content: bytes) -> UploadResult:
        """Send a file to ingestion; on success every source is re-dispatched."""
        try:
            async with self.client.open_session() as session:
                await self.client.upload_file(session, filename, content)
        except UploadError as e:
            self.logger.error(f"Upload of {filename} failed: {e}")
            return UploadResult(ok=False, message=e.message)
        await self.refresh_all()
        return UploadResult(ok=True, message=f"Uploaded {filename}")

    async def export(self) -> ExportResult:
        """Export the full filtered+sorted shortlist; raises ExportError on failure."""
        return await self.export_service.export(self.filters, self.sort_param or None)
