"""Display and formatting functions for CLI output."""

import json
from pathlib import Path

import click

from .charts import ChartCandidate, absolute_pdf_url
from .resolver import ChartMatch
from .routes import route_columns, route_rows
from .weather import (
    format_altimeter,
    format_clouds,
    format_temperature,
    format_time_field,
    format_visibility,
    format_wind,
    get_str_field,
)


def print_banner(title: str) -> None:
    """Print a title between two rules."""
    click.echo()
    click.echo("=" * 80)
    click.echo(title)
    click.echo("=" * 80)


def print_table_footer(count: int, item_name: str) -> None:
    """Print standard table footer with count."""
    click.echo(f"\nTotal: {count} {item_name}")
    click.echo()


def format_columns(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Lay out rows under headers, each column as wide as its widest cell.

    Returns the header line followed by one line per row.
    """
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def fmt(cells: list[str]) -> str:
        # Last column isn't padded
        padded = [f"{c:<{w}}" for c, w in zip(cells[:-1], widths[:-1])]
        return "  ".join(padded + cells[-1:]).rstrip()

    return [fmt(headers)] + [fmt(row) for row in rows]


def print_columns(headers: list[str], rows: list[list[str]]) -> None:
    lines = format_columns(headers, rows)
    click.echo(lines[0])
    click.echo("-" * min(max(len(line) for line in lines), 120))
    for line in lines[1:]:
        click.echo(line)


# --- Routes ---


def display_routes(origin: str, destination: str, rows: list) -> None:
    """Display preferred routes as a table with one column per API field."""
    columns = route_columns(rows)
    print_banner(f"PREFERRED ROUTES {origin} -> {destination}")
    print_columns(columns, route_rows(rows, columns))
    print_table_footer(len(rows), "route(s)")


# --- Weather ---


def _print_raw_or_json(report: dict, raw_key: str, raw: bool) -> None:
    raw_text = get_str_field(report, raw_key) or ""
    if raw_text:
        click.echo(raw_text)
        click.echo()
    elif raw:
        click.echo(json.dumps(report, indent=2))
        click.echo()


def display_metar(report: dict, raw: bool = False) -> None:
    """Display one METAR: raw observation text, then a decoded table."""
    _print_raw_or_json(report, "rawOb", raw)

    station = get_str_field(report, "icaoId") or get_str_field(report, "station_id")
    time = get_str_field(report, "reportTime") or format_time_field(report, "obsTime")
    row = [
        station or "",
        time,
        format_wind(report),
        format_visibility(report),
        format_temperature(report),
        format_altimeter(report),
        get_str_field(report, "fltCat") or "",
        format_clouds(report),
    ]
    print_columns(
        ["Station", "Time", "Wind", "Vis", "Temp/Dew", "Alt", "FlightCat", "Clouds"],
        [row],
    )


def display_taf(report: dict, station: str, raw: bool = False) -> None:
    """Display one TAF: raw text, a validity header, then one row per period."""
    _print_raw_or_json(report, "rawTAF", raw)

    name = get_str_field(report, "icaoId") or station
    issue = get_str_field(report, "issueTime") or ""
    valid_from = format_time_field(report, "validTimeFrom")
    valid_to = format_time_field(report, "validTimeTo")
    click.echo(f"{name}  issued: {issue}  valid: {valid_from} - {valid_to}")

    rows = []
    forecasts = report.get("fcsts")
    for fcst in forecasts if isinstance(forecasts, list) else []:
        if not isinstance(fcst, dict):
            continue
        start = format_time_field(fcst, "timeFrom")
        end = format_time_field(fcst, "timeTo")
        period = f"{start} - {end}" if start or end else ""
        rows.append(
            [
                period,
                format_wind(fcst),
                format_visibility(fcst),
                get_str_field(fcst, "wxString") or "",
                format_altimeter(fcst),
                format_clouds(fcst),
            ]
        )
    print_columns(["Period", "Wind", "Vis", "Wx", "Alt", "Clouds"], rows)


# --- Charts ---


def display_chart_matches(matches: list[ChartMatch], base_url: str) -> None:
    """Display numbered list of matching charts with their PDF links."""
    click.echo("\nMultiple charts found:")
    click.echo("-" * 60)
    for i, match in enumerate(matches, start=1):
        chart = match.chart
        type_str = chart.chart_code if chart.chart_code else "?"
        click.echo(
            f"  [{i}] [{type_str:<4}] {chart.title} (score: {match.score:.2f})"
        )
        click.echo(f"       {absolute_pdf_url(base_url, chart.pdf_ref)}")
    click.echo()
    click.echo("Refine your query or pass a more specific string.")


def display_chart_list(
    charts: list[ChartCandidate], base_url: str, limit: int | None = None
) -> None:
    """Display charts for an airport as an indexed table."""
    shown = charts if limit is None else charts[:limit]
    rows = [
        [str(i), chart.chart_code or "?", chart.title, absolute_pdf_url(base_url, chart.pdf_ref)]
        for i, chart in enumerate(shown, start=1)
    ]
    print_columns(["#", "Type", "Title", "PDF"], rows)
    if len(shown) < len(charts):
        click.echo(f"\nShowing {len(shown)} of {len(charts)} charts")


# --- Pubs ---


def display_pubs(path: Path, pubs: dict[str, str]) -> None:
    click.echo(f"Available pubs (from {path}):")
    for alias, url in pubs.items():
        click.echo(f" - {alias} -> {url}")
