import typer
from pathlib import Path
from typing import List, Optional, Tuple

from api.dashboard_client import DashboardClient
from api.error_handling import DashboardAPIError
from config.settings import Settings
from ui.charts.normalizers import normalize_kpis
from ui.services.export_service import ExportService
from ui.state.filter_state import FilterState
from ui.state.sort_state import decode_sort, encode_sort
from utils.async_runner import run_async
from utils.logger_setup import setup_logging

logger = setup_logging(logger_name="probate_cli_app", file_output=False)

app = typer.Typer(
    name="probate_cli",
    help="CLI tool to query, upload to and export from the probate records API.",
    add_completion=False
)


def _parse_filters(pairs: Optional[List[str]]) -> FilterState:
    """Turn repeated ``key=value`` options into a FilterState."""
    parsed: List[Tuple[str, str]] = []
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--filter")
        parsed.append((key.strip(), value.strip()))
    try:
        return FilterState.from_pairs(parsed)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--filter")


def _parse_sort(sort: Optional[str]) -> Optional[str]:
    """Validate ``col:dir,...`` and return it in wire form (None when empty)."""
    try:
        return encode_sort(decode_sort(sort)) or None
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--sort")


@app.command()
def export(
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Output CSV path. Defaults to a timestamped file in the exports directory."
    ),
    filters: Optional[List[str]] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Filter as key=value; repeat for several values (e.g. -f counties=Fulton -f counties=Cobb)."
    ),
    sort: Optional[str] = typer.Option(
        None,
        "--sort",
        "-s",
        help="Sort as column:direction pairs separated by commas (e.g. score:desc,county:asc)."
    ),
):
    """
    Export the full filtered and sorted shortlist to CSV.
    """
    filter_state = _parse_filters(filters)
    sort_param = _parse_sort(sort)
    typer.echo(f"Exporting shortlist with {len(filter_state)} active filter(s)...")

    try:
        result = run_async(ExportService(DashboardClient(logger_obj=logger), logger_obj=logger).export(filter_state, sort_param))
        path = out or Settings.get_export_path(result.filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(result.content)
    except DashboardAPIError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.secho(f"An unexpected error occurred during export: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if result.truncated:
        typer.secho(f"Warning: export capped at {result.row_count:,} of {result.total:,} rows", fg=typer.colors.YELLOW)
    typer.secho(f"Exported {result.row_count:,} rows to {path}", fg=typer.colors.GREEN)


@app.command()
def upload(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV or Excel file to ingest.")
):
    """
    Upload a records file for ingestion.
    """
    if path.suffix.lower().lstrip(".") not in Settings.UPLOAD_FILE_TYPES:
        typer.secho(f"Error: unsupported file type '{path.suffix}'", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Uploading {path.name}...")
    client = DashboardClient(logger_obj=logger)

    async def _upload():
        async with client.open_session() as session:
            await client.upload_file(session, path.name, path.read_bytes())

    try:
        run_async(_upload())
    except DashboardAPIError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"Uploaded {path.name}", fg=typer.colors.GREEN)


@app.command()
def kpis(
    filters: Optional[List[str]] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Filter as key=value; repeat for several values."
    ),
):
    """
    Print the KPI summary for the given filters.
    """
    filter_state = _parse_filters(filters)
    client = DashboardClient(logger_obj=logger)

    async def _fetch():
        async with client.open_session() as session:
            return await client.fetch_chart(session, "kpis", filter_state)

    try:
        rows = normalize_kpis(run_async(_fetch()))
    except Exception as e:
        typer.secho(f"An unexpected error occurred while fetching KPIs: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not rows:
        typer.echo("No KPIs returned.")
        return
    width = max(len(row["label"]) for row in rows)
    for row in rows:
        typer.echo(f"{row['label']:<{width}}  {row['value']}")


if __name__ == "__main__":
    app()
