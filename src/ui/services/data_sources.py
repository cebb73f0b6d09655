"""Independent dashboard data sources and their dispatch bookkeeping.

Each source (KPIs, one per chart, the shortlist) keeps its own cached data,
loading flag, error and dispatch generation. A response is applied only if
its generation is still the latest one dispatched for that source, so a slow
response for an old filter can never overwrite a newer result. Failures stay
local to the source that failed.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

import aiohttp

from api.dashboard_client import DashboardClient
from api.error_handling import categorize_error
from config.api import APIConfig
from ui.charts.normalizers import DERIVED_SERIES, NORMALIZERS, normalize
from ui.state.state_contracts import SourceError, SourceState

KPI_SOURCE = "kpis"
SHORTLIST_SOURCE = "shortlist"

# Every fetched source; order is the dispatch order
DATA_SOURCES: List[str] = list(NORMALIZERS)

CHART_SOURCES: List[str] = [name for name in DATA_SOURCES if name not in (KPI_SOURCE, SHORTLIST_SOURCE)]


class DataSourceOrchestrator:
    """Dispatches source fetches and keeps per-source state."""

    def __init__(
        self,
        client: DashboardClient,
        source_names: Optional[Iterable[str]] = None,
        page_size: int = APIConfig.SHORTLIST_PAGE_SIZE,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.page_size = page_size
        self.logger = logger_obj or logging.getLogger(__name__)
        names = list(source_names) if source_names is not None else list(DATA_SOURCES)
        unknown = [name for name in names if name not in NORMALIZERS]
        if unknown:
            raise ValueError(f"No normalizer registered for sources: {unknown}")
        self._states: Dict[str, SourceState] = {name: SourceState(name) for name in names}

    @property
    def source_names(self) -> List[str]:
        return list(self._states)

    def snapshot(self, name: str) -> SourceState:
        """Current state of one source (immutable)."""
        return self._states[name]

    def data(self, name: str, default: Any = None) -> Any:
        data = self._states[name].data
        return default if data is None else data

    def errors(self) -> Dict[str, SourceError]:
        return {name: state.error for name, state in self._states.items() if state.error is not None}

    def derived(self, name: str) -> Any:
        """Evaluate a derived series from the latest cached inputs."""
        inputs, build = DERIVED_SERIES[name]
        return build(*(self.data(source) for source in inputs))

    def _is_current(self, name: str, generation: int) -> bool:
        return self._states[name].generation == generation

    async def _fetch(
        self, session: aiohttp.ClientSession, name: str, filters: Any, sort: Optional[str], page: int
    ) -> Any:
        if name == SHORTLIST_SOURCE:
            return await self.client.fetch_shortlist(session, filters, sort, page, self.page_size)
        return await self.client.fetch_chart(session, name, filters)

    async def dispatch(
        self,
        name: str,
        filters: Any,
        sort: Optional[str] = None,
        page: int = 1,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> bool:
        """Fetch and normalize one source.

        Returns:
            True if the response was applied, False if it failed or was
            superseded by a later dispatch.
        """
        if session is None:
            async with self.client.open_session() as owned:
                return await self.dispatch(name, filters, sort, page, session=owned)

        generation = self._states[name].generation + 1
        self._states[name] = replace(self._states[name], loading=True, generation=generation)

        try:
            data = normalize(name, await self._fetch(session, name, filters, sort, page))
        except Exception as e:
            if not self._is_current(name, generation):
                self.logger.debug(f"Discarding stale failure for {name} (generation {generation})")
                return False
            category = categorize_error(e)
            self.logger.error(f"Source {name} failed with {category.value} error: {e}")
            self._states[name] = replace(
                self._states[name], loading=False, error=SourceError(category, str(e) or type(e).__name__)
            )
            return False

        if not self._is_current(name, generation):
            self.logger.debug(
                f"Discarding stale response for {name} "
                f"(generation {generation}, latest {self._states[name].generation})"
            )
            return False

        self._states[name] = replace(self._states[name], data=data, loading=False, error=None)
        return True

    async def dispatch_many(
        self,
        names: Iterable[str],
        filters: Any,
        sort: Optional[str] = None,
        page: int = 1,
    ) -> Dict[str, bool]:
        """Dispatch several sources in parallel over one session."""
        names = [name for name in names if name in self._states]
        if not names:
            return {}
        self.logger.info(f"Dispatching {len(names)} source(s): {', '.join(names)}")
        async with self.client.open_session() as session:
            results = await asyncio.gather(
                *(self.dispatch(name, filters, sort, page, session=session) for name in names)
            )
        return dict(zip(names, results))

    async def dispatch_all(self, filters: Any, sort: Optional[str] = None, page: int = 1) -> Dict[str, bool]:
        return await self.dispatch_many(self.source_names, filters, sort, page)
