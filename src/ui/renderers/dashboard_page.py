"""
Dashboard page renderer.

Renders the active-filter chips, KPI bar, chart tabs, shortlist and the
upload/export actions. Every user action goes through the session's
DashboardController and is followed by a rerun.
"""

import logging
from typing import Any, Coroutine, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from api.error_handling import ExportError
from config.charts import ChartConfig
from config.settings import Settings
from config.table_config import SHORTLIST_COLUMNS, get_backend_column, get_column_header
from ui.charts.drilldown import ChartEvent, ChartKind
from ui.charts.normalizers import DERIVED_SERIES
from ui.renderers import dashboard_charts as charts
from ui.services.dashboard_controller import DashboardController
from ui.state.session_manager import SessionStateManager
from utils.async_runner import run_async


class DashboardPageRenderer:
    """Renders the dashboard page for one session controller."""

    def __init__(self, controller: DashboardController, logger_obj: Optional[logging.Logger] = None):
        self.controller = controller
        self.logger = logger_obj or logging.getLogger(__name__)

    def _run(self, coro: Coroutine[Any, Any, Any], rerun: bool = True) -> Any:
        result = run_async(coro)
        if rerun:
            st.rerun()
        return result

    # ---------- sections ----------

    def render(self) -> None:
        if not SessionStateManager.is_dashboard_loaded():
            with st.spinner("Loading dashboard…"):
                run_async(self.controller.refresh_all())
            SessionStateManager.mark_dashboard_loaded()

        self.render_actions()
        self.render_filter_chips()
        self.render_kpis()
        self.render_chart_tabs()
        self.render_quick_actions()
        self.render_shortlist()

    def render_actions(self) -> None:
        """Upload and export controls."""
        message = SessionStateManager.pop_upload_message()
        if message:
            ok, text = message
            (st.success if ok else st.error)(text)

        upload_col, export_col = st.columns(2)
        with upload_col:
            uploaded = st.file_uploader("Upload CSV/XLSX", type=Settings.UPLOAD_FILE_TYPES, key="upload_file")
            if uploaded is not None and st.button("Ingest file", key="upload_submit"):
                with st.spinner(f"Uploading {uploaded.name}…"):
                    result = run_async(self.controller.upload(uploaded.name, uploaded.getvalue()))
                SessionStateManager.set_upload_message(result.ok, result.message)
                st.rerun()

        with export_col:
            if st.button("Prepare CSV export", key="export_prepare"):
                try:
                    with st.spinner("Exporting shortlist…"):
                        result = run_async(self.controller.export())
                    SessionStateManager.set_export_result(result)
                except ExportError as e:
                    SessionStateManager.set_export_result(error=e.message)

            error = st.session_state.get("export_error")
            result = st.session_state.get("export_result")
            if error:
                st.error(error)
            elif result is not None:
                if result.truncated:
                    st.warning(f"Export capped at {result.row_count:,} of {result.total:,} rows")
                st.download_button(
                    f"Download {result.filename} ({result.row_count:,} rows)",
                    data=result.content,
                    file_name=result.filename,
                    mime="text/csv",
                    key="export_download",
                )

    def render_filter_chips(self) -> None:
        chips = self.controller.filters.chips()
        if not chips:
            return
        cols = st.columns(len(chips) + 1)
        for col, (key, text) in zip(cols, chips):
            with col:
                if st.button(f"{text} ×", key=f"chip_{key}"):
                    self._run(self.controller.clear_filter(key))
        with cols[-1]:
            if st.button("Clear all", key="chip_clear_all"):
                self._run(self.controller.clear_all_filters())

    def _render_source_status(self, name: str) -> bool:
        """Spinner/error caption for a source; True if it has data to draw."""
        state = self.controller.orchestrator.snapshot(name)
        if state.loading:
            st.caption("Loading…")
        if state.error is not None:
            st.caption(f"⚠️ {ChartConfig.get_title(name)} unavailable ({state.error.category.value}): {state.error.message}")
        return state.has_data

    def render_kpis(self) -> None:
        if not self._render_source_status("kpis"):
            return
        kpis = self.controller.orchestrator.data("kpis", [])
        for start in range(0, len(kpis), 4):
            cols = st.columns(4)
            for col, kpi in zip(cols, kpis[start:start + 4]):
                with col:
                    st.metric(kpi["label"], kpi["value"], help=kpi.get("hint"))

    def _chart(self, figure: Optional[go.Figure], key: str, kind: Optional[ChartKind] = None) -> None:
        if figure is None:
            st.info("No data")
            return
        if kind is None:
            st.plotly_chart(figure, use_container_width=True, key=key)
            return
        event = st.plotly_chart(figure, use_container_width=True, key=key, on_select="rerun", selection_mode="points")
        signature = charts.selection_signature(event)
        if SessionStateManager.consume_selection(key, signature):
            chart_event = charts.selection_to_event(kind, event)
            if chart_event is not None:
                self._run(self.controller.handle_chart_event(chart_event))

    def _source_chart(self, name: str, build, kind: Optional[ChartKind] = None, source: Optional[str] = None) -> None:
        if not self._render_source_status(source or name):
            return
        data = self.controller.orchestrator.data(source or name, [])
        self._chart(build(data, ChartConfig.get_title(name)), f"chart_{name}", kind)

    def render_chart_tabs(self) -> None:
        orch = self.controller.orchestrator
        overview, counties, timing, value = st.tabs(["Overview", "Counties", "Timing", "Value & Class"])

        with overview:
            c1, c2, c3 = st.columns(3)
            with c1:
                self._source_chart(
                    "filings-by-month-tiered",
                    lambda rows, title: charts.stacked_area(rows, list(ChartConfig.TIER_ORDER), title),
                    ChartKind.MONTH_SERIES,
                )
            with c2:
                inputs, _ = DERIVED_SERIES["absentee_stack"]
                ready = [self._render_source_status(source) for source in inputs]
                stack = orch.derived("absentee_stack") if all(ready) else []
                self._chart(
                    charts.stacked_area(stack, ["local", "absentee"], ChartConfig.get_title("absentee_stack")),
                    "chart_absentee_stack",
                    ChartKind.MONTH_SERIES,
                )
            with c3:
                self._source_chart("property-class-mix", charts.class_mix, ChartKind.CLASS_MIX)

        with counties:
            c1, c2 = st.columns(2)
            with c1:
                self._source_chart(
                    "count-by-county",
                    lambda rows, title: charts.bar(rows, "county", ["absentee", "local"], title, stacked=True),
                    ChartKind.COUNTY_BAR,
                )
            with c2:
                self._source_chart("average-value-by-county", charts.value_by_county, ChartKind.COUNTY_BAR)

        with timing:
            c1, c2 = st.columns(2)
            with c1:
                self._source_chart(
                    "binned-days-since-petition",
                    lambda rows, title: charts.bar(rows, "bucket", "count", title, color="med"),
                    ChartKind.DAYS_SINCE_PETITION_BUCKET,
                )
                self._source_chart(
                    "filings-by-month",
                    lambda rows, title: charts.line(rows, "month", "count", title),
                    ChartKind.MONTH_SERIES,
                )
            with c2:
                self._source_chart(
                    "binned-days-petition-to-death",
                    lambda rows, title: charts.bar(rows, "bucket", "count", title, color="purple"),
                    ChartKind.DAYS_DEATH_TO_PETITION_BUCKET,
                )
                self._source_chart(
                    "petition-types",
                    lambda rows, title: charts.bar(rows, "petition_type", "count", title, color="accent"),
                    ChartKind.PETITION_TYPE_BAR,
                )

        with value:
            c1, c2 = st.columns(2)
            with c1:
                self._source_chart(
                    "value-histogram",
                    lambda rows, title: charts.bar(rows, "bucket", "count", title),
                    ChartKind.VALUE_BUCKET,
                )
            with c2:
                self._source_chart(
                    "get-parties",
                    lambda rows, title: charts.bar(rows, "party", "holdings", title, color="absentee"),
                )

    def render_quick_actions(self) -> None:
        if st.button("Show Absentee Only", key="quick_absentee_only"):
            self._run(self.controller.handle_chart_event(ChartEvent(ChartKind.ABSENTEE_ONLY)))

    def render_pager(self, position: str) -> None:
        meta = self.controller.page_meta
        if meta is None:
            return
        loading = self.controller.orchestrator.snapshot("shortlist").loading
        info, prev_col, page_col, next_col = st.columns([4, 1, 1, 1])
        info.caption(meta.summary())
        page_col.caption(f"{meta.page} / {max(1, meta.total_pages)}")
        if prev_col.button("Previous", key=f"pager_prev_{position}", disabled=not meta.has_prev or loading):
            self._run(self.controller.previous_page())
        if next_col.button("Next", key=f"pager_next_{position}", disabled=not meta.has_next or loading):
            self._run(self.controller.next_page())

    def render_shortlist(self) -> None:
        st.subheader("Shortlist")
        self._render_source_status("shortlist")
        self.render_pager("top")

        sort = self.controller.sort
        header_cols = st.columns(len(SHORTLIST_COLUMNS))
        for col, column in zip(header_cols, SHORTLIST_COLUMNS):
            with col:
                if st.button(f"{get_column_header(column)} {sort.indicator(column)}".strip(), key=f"sort_{column}"):
                    self._run(self.controller.toggle_sort(column))
        if not sort.is_empty and st.button("Clear sort", key="sort_clear"):
            self._run(self.controller.clear_sort())

        rows = self.controller.shortlist_rows
        if rows:
            df = pd.DataFrame(rows).reindex(columns=[get_backend_column(c) for c in SHORTLIST_COLUMNS])
            df.columns = [get_column_header(c) for c in SHORTLIST_COLUMNS]
            st.dataframe(df, use_container_width=True, hide_index=True)
        else:
            st.info("No results")

        self.render_pager("bottom")
