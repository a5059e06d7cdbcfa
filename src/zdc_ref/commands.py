"""Shared command implementations for the CLI."""

import json
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor

import click

from .charts import (
    ChartQuery,
    ChartType,
    absolute_pdf_url,
    download_and_merge_pdfs,
    fetch_charts_with_fallback,
    find_all_chart_pages,
    sanitize_chart_filename,
)
from .cli_utils import echo_verbose, open_in_browser, open_url
from .config import get_charts_base, get_config_path
from .display import (
    display_chart_list,
    display_chart_matches,
    display_metar,
    display_pubs,
    display_routes,
    display_taf,
)
from .pubs import find_pub, load_or_create_pubs
from .resolver import Ambiguous, NoMatch, resolve
from .routes import (
    RoutesApiError,
    build_routes_url,
    fetch_preferred_routes,
    normalize_route_airport,
)
from .weather import WeatherApiError, fetch_station_reports

# Charts shown as a hint when nothing matched
NO_MATCH_LIST_LIMIT = 12


# --- Routes ---


def do_route_lookup(
    origin: str, destination: str, raw: bool = False, verbose: bool = False
) -> None:
    """Look up FAA preferred routes between two airports."""
    origin = normalize_route_airport(origin)
    destination = normalize_route_airport(destination)
    echo_verbose(verbose, f"GET {build_routes_url(origin, destination)}")

    try:
        rows = fetch_preferred_routes(origin, destination)
    except RoutesApiError as e:
        raise click.ClickException(str(e)) from e

    if not rows:
        click.echo(f"No preferred routes found for {origin} -> {destination}")
        return

    if raw:
        click.echo(json.dumps(rows, indent=2))
        return

    display_routes(origin, destination, rows)


# --- Weather ---


def _fetch_reports(endpoint: str, station: str) -> tuple[str, list]:
    try:
        return fetch_station_reports(endpoint, station)
    except WeatherApiError as e:
        raise click.ClickException(str(e)) from e


def _show_metars(station: str, reports: list, raw: bool, as_json: bool) -> None:
    if not reports:
        click.echo(f"No METAR data found for {station}", err=True)
        return
    if as_json:
        click.echo(json.dumps(reports, indent=2))
        return
    for report in reports:
        if isinstance(report, dict):
            display_metar(report, raw=raw)


def _show_tafs(station: str, reports: list, raw: bool, as_json: bool) -> None:
    if not reports:
        click.echo(f"No TAF data found for {station}", err=True)
        return
    if as_json:
        click.echo(json.dumps(reports, indent=2))
        return
    for report in reports:
        if isinstance(report, dict):
            display_taf(report, station, raw=raw)


def do_metar_lookup(
    station: str, raw: bool = False, as_json: bool = False, verbose: bool = False
) -> None:
    echo_verbose(verbose, f"Fetching METAR for {station.upper()}")
    station, reports = _fetch_reports("metar", station)
    _show_metars(station, reports, raw, as_json)


def do_taf_lookup(
    station: str, raw: bool = False, as_json: bool = False, verbose: bool = False
) -> None:
    echo_verbose(verbose, f"Fetching TAF for {station.upper()}")
    station, reports = _fetch_reports("taf", station)
    _show_tafs(station, reports, raw, as_json)


def do_weather_lookup(
    station: str, raw: bool = False, as_json: bool = False, verbose: bool = False
) -> None:
    """METAR then TAF for a station; both requests run concurrently."""
    echo_verbose(verbose, f"Fetching METAR and TAF for {station.upper()}")
    with ThreadPoolExecutor(max_workers=2) as pool:
        metar_future = pool.submit(_fetch_reports, "metar", station)
        taf_future = pool.submit(_fetch_reports, "taf", station)
        metar_station, metars = metar_future.result()
        taf_station, tafs = taf_future.result()

    _show_metars(metar_station, metars, raw, as_json)
    click.echo()
    _show_tafs(taf_station, tafs, raw, as_json)


# --- Charts ---


def open_chart_pdf(
    pdf_urls: list[str], airport: str, chart_name: str, verbose: bool = False
) -> str | None:
    """Open chart PDF(s) with the system handler.

    Multi-page charts are merged into one temp file first. If nothing can
    be opened, the URLs are printed instead.

    Returns:
        Path or URL that was opened, or None if the URLs were printed.
    """
    num_pages = len(pdf_urls)

    if num_pages > 1:
        click.echo(f"Chart has {num_pages} pages, merging...")
        temp_path = os.path.join(
            tempfile.gettempdir(), sanitize_chart_filename(airport, chart_name)
        )
        if download_and_merge_pdfs(pdf_urls, temp_path):
            echo_verbose(verbose, f"Opening {temp_path}")
            if open_in_browser(temp_path):
                click.echo(f"Chart found: {chart_name} ({num_pages} pages)")
                return temp_path
        else:
            click.echo("Failed to merge PDF pages, opening first page only", err=True)

    url = pdf_urls[0]
    echo_verbose(verbose, f"Opening {url}")
    if open_url(url):
        click.echo(f"Opening chart: {chart_name}")
        return url

    click.echo("Failed to open chart, links:", err=True)
    for u in pdf_urls:
        click.echo(u)
    return None


def do_chart_lookup(
    airport: str,
    terms: list[str] | tuple[str, ...],
    link_only: bool = False,
    auto_open: bool = True,
    verbose: bool = False,
) -> str | None:
    """Look up a chart by fuzzy name and open or print it.

    Args:
        airport: Airport identifier (e.g., "IAD" or "KIAD")
        terms: Search terms (e.g., ("ILS", "1R"))
        link_only: Print PDF URL(s) instead of opening
        auto_open: False when --no-open was given; behaves like link_only
        verbose: Print diagnostics to stderr

    Returns the first PDF URL (or merged file path) if a chart was chosen.
    """
    base_url = get_charts_base()
    query = ChartQuery.parse(airport, terms)

    echo_verbose(verbose, f"charts base: {base_url}")
    echo_verbose(verbose, f"airport arg: {airport}")
    echo_verbose(verbose, f"query tokens: {query.tokens}")

    printing = link_only or not auto_open
    if not printing:
        click.echo(f"Looking up: {query.airport} - {query.chart_name}")
        if query.chart_type != ChartType.UNKNOWN:
            click.echo(f"  Detected type: {query.chart_type.value.upper()}")

    found_airport, charts = fetch_charts_with_fallback(query.airport, base_url)
    if found_airport != query.airport:
        echo_verbose(verbose, f"retried as {found_airport}")

    if not charts:
        click.echo(f"No charts found for {query.airport}", err=True)
        return None

    # Continuation pages are regrouped with their base chart after matching
    primary = [c for c in charts if not c.is_continuation]
    result = resolve(primary, query.tokens)

    if isinstance(result, NoMatch):
        searched = " ".join(result.query_words) or "(empty query)"
        click.echo(
            f"No chart matched '{searched}' at {found_airport}.", err=True
        )
        click.echo(f"\nCharts for {found_airport}:")
        display_chart_list(primary, base_url, limit=NO_MATCH_LIST_LIMIT)
        return None

    if isinstance(result, Ambiguous):
        display_chart_matches(list(result.matches), base_url)
        return None

    chart = result.candidate
    pages = find_all_chart_pages(charts, chart)
    pdf_urls = [absolute_pdf_url(base_url, page.pdf_ref) for page in pages]

    if printing:
        for url in pdf_urls:
            click.echo(url)
        return pdf_urls[0]

    return open_chart_pdf(pdf_urls, found_airport, chart.title, verbose=verbose)


# Chart type aliases for list command
CHART_TYPE_ALIASES = {
    "SID": "DP",
    "APP": "IAP",
    "TAXI": "APD",
}

VALID_CHART_TYPES = {"DP", "STAR", "IAP", "APD", "GEN"}


def do_list_charts(airport: str, chart_type: str | None = None) -> None:
    """List charts for an airport, optionally filtered by type.

    Args:
        airport: Airport code (e.g., "IAD", "KBWI")
        chart_type: Optional chart type filter (DP, STAR, IAP, APD, GEN or aliases)
    """
    airport = airport.upper()

    filter_type = None
    if chart_type:
        chart_type = chart_type.upper()
        filter_type = CHART_TYPE_ALIASES.get(chart_type, chart_type)
        if filter_type not in VALID_CHART_TYPES:
            click.echo(
                f"Unknown chart type: {chart_type}. "
                f"Valid types: DP/SID, STAR, IAP/APP, APD/TAXI, GEN",
                err=True,
            )
            return

    base_url = get_charts_base()
    found_airport, charts_list = fetch_charts_with_fallback(airport, base_url)

    if filter_type and charts_list:
        charts_list = [c for c in charts_list if c.chart_code == filter_type]

    if not charts_list:
        if filter_type:
            click.echo(f"No {filter_type} charts found for {airport}")
        else:
            click.echo(f"No charts found for {airport}")
        return

    if filter_type:
        click.echo(f"\n{filter_type} charts for {found_airport}:")
    else:
        click.echo(f"\nAvailable charts for {found_airport}:")
    display_chart_list(charts_list, base_url)


# --- Pubs ---


def do_list_pubs() -> None:
    path = get_config_path()
    display_pubs(path, load_or_create_pubs(path))


def do_open_pub(alias: str, no_open: bool = False) -> None:
    """Open (or print) the URL bookmarked under a pub alias."""
    pubs = load_or_create_pubs(get_config_path())
    url = find_pub(pubs, alias)
    if url is None:
        click.echo(f"Unknown pub '{alias}'. Run --list to see aliases.", err=True)
        click.get_current_context().exit(2)

    if no_open or not open_url(url):
        click.echo(url)
