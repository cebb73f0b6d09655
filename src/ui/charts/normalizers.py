"""Response normalizers for dashboard data sources.

Every source registered with the orchestrator has one pure transform here
that turns the raw API JSON into the series shape the renderers expect.
The query API sometimes wraps a payload in a single-element list; all
transforms unwrap that first.

Derived series are built from the cached output of other sources rather
than fetched, e.g. the absentee/local stack per month is reconstructed
from the absentee-rate trend and the monthly filing totals.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from config.charts import ChartConfig
from ui.state.state_contracts import PageMeta

Row = Dict[str, Any]

PERCENT_KPIS = {"Absentee %", "With Parcel", "With qPublic"}
CURRENCY_KPIS = {"Median Value"}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def unwrap_payload(raw: Any) -> Mapping[str, Any]:
    """Return the payload object whether or not it arrived wrapped in a list."""
    if isinstance(raw, list):
        raw = raw[0] if raw else {}
    return raw if isinstance(raw, Mapping) else {}


def _rows(raw: Any, key: str) -> List[Mapping[str, Any]]:
    rows = unwrap_payload(raw).get(key) or []
    return [row for row in rows if isinstance(row, Mapping)]


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


# ---------- KPI formatting ----------

def format_percent(ratio: float) -> str:
    """``0.61`` -> ``"61%"``; values above 1 are taken as already in percent."""
    percent = ratio * 100 if abs(ratio) <= 1 else ratio
    return f"{round_half_up(percent)}%"


def format_currency(value: float) -> str:
    """Compact dollars: ``$248k``, ``$1.2M``, ``$950``."""
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"${round_half_up(value / 1_000)}k"
    return f"${value:,.0f}"


def format_kpi_value(label: str, value: Any) -> str:
    if value is None:
        return "—"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if label in PERCENT_KPIS or label.endswith("%"):
        return format_percent(float(value))
    if label in CURRENCY_KPIS:
        return format_currency(float(value))
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


# ---------- per-source transforms ----------

def normalize_kpis(raw: Any) -> List[Row]:
    out = []
    for row in _rows(raw, "kpis"):
        label = str(row.get("label", ""))
        item = {"label": label, "value": format_kpi_value(label, row.get("value")), "raw": row.get("value")}
        if row.get("hint"):
            item["hint"] = row["hint"]
        out.append(item)
    return out


def normalize_property_class_mix(raw: Any) -> List[Row]:
    return [
        {"property_class": str(r.get("property_class", "")), "count": _int(r.get("count"))}
        for r in _rows(raw, "propertyClassMix")
    ]


def normalize_count_by_county(raw: Any) -> List[Row]:
    """Counties as an absentee/local split; a bare count is all absentee until the API splits it."""
    out = []
    for r in _rows(raw, "countByCounty"):
        if "absentee" in r or "local" in r:
            absentee, local = _int(r.get("absentee")), _int(r.get("local"))
        else:
            absentee, local = _int(r.get("count")), 0
        out.append({"county": str(r.get("county", "")), "absentee": absentee, "local": local})
    return out


def normalize_average_value_by_county(raw: Any) -> List[Row]:
    return [
        {"county": str(r.get("county", "")), "average_value": _float(r.get("average_value"))}
        for r in _rows(raw, "averageValueByCounty")
    ]


def _histogram(key: str) -> Callable[[Any], List[Row]]:
    def normalize(raw: Any) -> List[Row]:
        return [
            {"bucket": str(r.get("bin", r.get("bucket", ""))), "count": _int(r.get("count"))}
            for r in _rows(raw, key)
        ]

    normalize.__name__ = f"normalize_{key}"
    return normalize


def normalize_petition_types(raw: Any) -> List[Row]:
    return [
        {"petition_type": str(r.get("petition_type", "")), "count": _int(r.get("count"))}
        for r in _rows(raw, "petitionTypes")
    ]


def normalize_parties(raw: Any) -> List[Row]:
    return [{"party": str(r.get("party", "")), "holdings": _int(r.get("count"))} for r in _rows(raw, "parties")]


def normalize_filings_by_month(raw: Any) -> List[Row]:
    return [{"month": str(r.get("month", "")), "count": _int(r.get("count"))} for r in _rows(raw, "filingsByMonth")]


def normalize_filings_by_month_tiered(raw: Any) -> List[Row]:
    return [
        {"month": str(r.get("month", "")), **{tier: _int(r.get(tier)) for tier in ChartConfig.TIER_ORDER}}
        for r in _rows(raw, "filingsByMonthTiered")
    ]


def normalize_absentee_rate_trend(raw: Any) -> List[Row]:
    return [{"month": str(r.get("month", "")), "rate": _float(r.get("rate"))} for r in _rows(raw, "absenteeRateTrend")]


def normalize_value_histogram(raw: Any) -> List[Row]:
    """Value buckets, ordered by the fixed bucket table."""
    order = ChartConfig.get_value_bucket_order()
    rows = _histogram("valueHist")(raw)
    return sorted(rows, key=lambda r: order.get(r["bucket"], len(order)))


def normalize_shortlist(raw: Any) -> Dict[str, Any]:
    payload = unwrap_payload(raw)
    rows = payload.get("rows")
    if rows is None:
        rows = payload.get("shortlist") or []
    return {"rows": [dict(r) for r in rows], "meta": PageMeta.from_payload(payload.get("meta") or {})}


NORMALIZERS: Dict[str, Callable[[Any], Any]] = {
    "kpis": normalize_kpis,
    "property-class-mix": normalize_property_class_mix,
    "count-by-county": normalize_count_by_county,
    "average-value-by-county": normalize_average_value_by_county,
    "binned-days-since-petition": _histogram("daysSincePetitionHist"),
    "binned-days-petition-to-death": _histogram("daysDeathToPetitionHist"),
    "petition-types": normalize_petition_types,
    "get-parties": normalize_parties,
    "filings-by-month": normalize_filings_by_month,
    "filings-by-month-tiered": normalize_filings_by_month_tiered,
    "absentee-rate-trend": normalize_absentee_rate_trend,
    "value-histogram": normalize_value_histogram,
    "shortlist": normalize_shortlist,
}


def normalize(source_name: str, raw: Any) -> Any:
    """Apply the registered transform for ``source_name``.

    Raises:
        KeyError: if no transform is registered for the source.
    """
    return NORMALIZERS[source_name](raw)


# ---------- derived series ----------

def synthesize_absentee_stack(rate_series: Optional[List[Row]], total_series: Optional[List[Row]]) -> List[Row]:
    """Stacked absentee/local counts per month from a rate series and a totals series.

    Output follows the months of ``rate_series``; months missing from the
    totals count as 0 and months only present in the totals are dropped.
    """
    totals = {r["month"]: _int(r.get("count")) for r in (total_series or [])}
    out = []
    for r in rate_series or []:
        total = totals.get(r["month"], 0)
        absentee = round_half_up(total * _float(r.get("rate")))
        out.append({"month": r["month"], "absentee": absentee, "local": max(0, total - absentee)})
    return out


DERIVED_SERIES: Dict[str, Tuple[Tuple[str, ...], Callable[..., Any]]] = {
    "absentee_stack": (("absentee-rate-trend", "filings-by-month"), synthesize_absentee_stack),
}
