"""CLI utility functions and help text."""

import webbrowser
from pathlib import Path

import click

# Detailed help for individual commands
COMMAND_HELP = {
    "chart": """
chart - Look up a chart and open the PDF

Chart names are fuzzy-matched against the charts published for the
airport, so "CNDEL5" finds "CNDEL FIVE" and "28R ILS" finds
"ILS OR LOC RWY 28R". Multi-page charts (with CONT.1, CONT.2 pages)
are merged into one PDF before opening. If several charts match
equally well they are listed instead.

\b
Examples:
  chart IAD ILS 1R       - ILS approach to runway 1R
  chart DCA TAXI         - Airport diagram
  chart IAD JCOBY4       - JCOBY FOUR arrival
  chart BWI RNAV 28 -l   - Print the PDF link only
""",
    "list": """
list - List charts for an airport

Shows available charts for the specified airport. Optionally filter
by chart type. Type aliases: SID=DP, APP=IAP, TAXI=APD.

\b
Examples:
  list IAD               - List all IAD charts
  list DCA SID           - List DCA departure procedures
  list BWI APP           - List BWI instrument approaches
""",
    "route": """
route - Look up FAA preferred routes between two airports

A leading K is dropped from either airport (KIAD -> IAD).

\b
Examples:
  route IAD BOS          - Preferred routes from IAD to BOS
  route KDCA KATL --raw  - Print the API response as JSON
""",
    "metar": """
metar - Look up the current METAR for a station

3-letter identifiers are retried with a K prefix when nothing is found.

\b
Examples:
  metar KIAD             - Decoded METAR for Dulles
  metar DCA --json       - Raw API JSON
""",
    "taf": """
taf - Look up the current TAF for a station

\b
Examples:
  taf KBWI               - TAF for BWI, one row per forecast period
""",
    "weather": """
weather - METAR and TAF for a station

\b
Examples:
  weather RIC            - METAR followed by TAF for Richmond
""",
}


def open_url(url: str) -> bool:
    """Open a URL with the system default handler.

    Returns:
        True if a handler accepted the URL.
    """
    try:
        return webbrowser.open(url)
    except webbrowser.Error:
        return False


def open_in_browser(file_path: str, view: str = "FitV") -> bool:
    """Open a local PDF with the system default handler.

    Args:
        file_path: Path to the local file to open.
        view: PDF view parameter (e.g., "FitV" for fit to height).

    Returns:
        True if opened successfully.
    """
    file_uri = Path(file_path).as_uri()
    if view:
        file_uri = f"{file_uri}#view={view}"
    return open_url(file_uri)


class ImplicitChartGroup(click.Group):
    """Custom group that treats unknown commands as implicit chart queries."""

    def resolve_command(self, ctx, args):
        """Resolve "zdc IAD ILS 1R" as "zdc chart IAD ILS 1R"."""
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            return "chart", self.get_command(ctx, "chart"), list(args)
        return super().resolve_command(ctx, args)


def echo_verbose(enabled: bool, message: str) -> None:
    """Write a diagnostic line to stderr when --verbose is on."""
    if enabled:
        click.echo(message, err=True)
