"""
Plotly figures for the dashboard charts and selection-to-event conversion.

Figure builders take normalized series and return ``None`` when there is
nothing to draw, so the page can show a placeholder instead.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from config.charts import ChartConfig
from ui.charts.drilldown import ChartEvent, ChartKind

Rows = List[Dict[str, Any]]

# Plotly reports a point on a date-typed axis as YYYY-MM-DD
_DATE_LABEL_RE = re.compile(r"^(\d{4}-\d{2})-\d{2}")


def _layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        height=ChartConfig.CHART_HEIGHT,
        margin=dict(l=20, r=20, t=50, b=20),
        legend=dict(orientation="h", y=-0.2),
        clickmode="event+select",
    )
    return fig


def stacked_area(rows: Rows, keys: List[str], title: str, x: str = "month") -> Optional[go.Figure]:
    """Stacked area over months, one trace per key (first key at the bottom).

    Markers make the month points selectable.
    """
    if not rows:
        return None
    df = pd.DataFrame(rows)
    colors = ChartConfig.PALETTE
    fig = go.Figure()
    for key in keys:
        fig.add_trace(
            go.Scatter(
                x=df[x],
                y=df[key],
                name=key,
                mode="lines+markers",
                stackgroup="one",
                line=dict(color=colors.get(key)),
            )
        )
    fig.update_xaxes(type="category")
    return _layout(fig, title)


def bar(rows: Rows, x: str, y, title: str, color: str = "high", stacked: bool = False) -> Optional[go.Figure]:
    """Bar chart; ``y`` may be a list of columns for a stacked bar."""
    if not rows:
        return None
    df = pd.DataFrame(rows)
    if stacked:
        fig = px.bar(
            df, x=x, y=y, barmode="stack",
            color_discrete_map={k: ChartConfig.PALETTE.get(k) for k in y},
        )
    else:
        fig = px.bar(df, x=x, y=y, color_discrete_sequence=[ChartConfig.PALETTE[color]])
    return _layout(fig, title)


def line(rows: Rows, x: str, y: str, title: str) -> Optional[go.Figure]:
    if not rows:
        return None
    fig = px.line(pd.DataFrame(rows), x=x, y=y, markers=True, color_discrete_sequence=[ChartConfig.PALETTE["high"]])
    fig.update_xaxes(type="category")
    return _layout(fig, title)


def class_mix(rows: Rows, title: str, names: str = "property_class", values: str = "count") -> Optional[go.Figure]:
    """Horizontal bar per property class, one trace so point indexes match row order."""
    if not rows:
        return None
    df = pd.DataFrame(rows)
    colors = [ChartConfig.CLASS_MIX_COLORS[i % len(ChartConfig.CLASS_MIX_COLORS)] for i in range(len(df))]
    fig = go.Figure(go.Bar(x=df[values], y=df[names], orientation="h", marker=dict(color=colors)))
    fig.update_yaxes(type="category", autorange="reversed")
    return _layout(fig, title)


def value_by_county(rows: Rows, title: str) -> Optional[go.Figure]:
    """Average value per county with the buy-box band shaded."""
    fig = bar(rows, "county", "average_value", title)
    if fig is None:
        return None
    thresholds = ChartConfig.THRESHOLDS
    fig.add_hrect(
        y0=thresholds["buybox_value_min"],
        y1=thresholds["buybox_value_max"],
        fillcolor=ChartConfig.PALETTE["success"],
        opacity=0.12,
        line_width=0,
        annotation_text="Buy-box",
        annotation_position="top left",
    )
    fig.update_yaxes(tickprefix="$", separatethousands=True)
    return fig


def selection_to_event(kind: ChartKind, selection: Optional[Mapping[str, Any]]) -> Optional[ChartEvent]:
    """Turn a Streamlit ``on_select`` payload into a ``ChartEvent``.

    Args:
        kind: The chart the selection came from
        selection: ``event.selection`` (or the whole event) returned by
            ``st.plotly_chart``

    Returns:
        The event for the first selected point, or None when nothing is selected
    """
    if not selection:
        return None
    if "selection" in selection:
        selection = selection["selection"] or {}
    points = selection.get("points") or []
    if not points:
        return None
    point = points[0]
    label = point.get("label", point.get("x"))
    if kind is ChartKind.MONTH_SERIES and label is not None:
        match = _DATE_LABEL_RE.match(str(label))
        if match:
            label = match.group(1)
    index = point.get("point_index", point.get("point_number"))
    return ChartEvent(
        kind=kind,
        label=None if label is None else str(label),
        index=None if index is None else int(index),
    )


def selection_signature(selection: Optional[Mapping[str, Any]]) -> str:
    """Stable text form of a selection, used to process each click once."""
    if not selection:
        return ""
    if "selection" in selection:
        selection = selection["selection"] or {}
    points = selection.get("points") or []
    return "|".join(
        f"{p.get('curve_number')}:{p.get('point_index', p.get('point_number'))}:{p.get('label', p.get('x'))}"
        for p in points
    )
