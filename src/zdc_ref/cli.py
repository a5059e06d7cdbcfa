"""CLI interface for ZDC Reference lookups."""

import click

from . import __version__
from .cli_utils import COMMAND_HELP, ImplicitChartGroup
from .commands import (
    do_chart_lookup,
    do_list_charts,
    do_list_pubs,
    do_metar_lookup,
    do_open_pub,
    do_route_lookup,
    do_taf_lookup,
    do_weather_lookup,
)


@click.group(cls=ImplicitChartGroup, invoke_without_command=True)
@click.version_option(__version__, prog_name="zdc")
@click.option("--verbose", "-v", is_flag=True, help="Print diagnostics to stderr")
@click.option("--no-open", is_flag=True, help="Print URLs instead of opening them")
@click.option("--pubs", "-p", "pub_alias", default=None, help="Open a bookmarked pub")
@click.option("--list", "-l", "list_pubs", is_flag=True, help="List bookmarked pubs")
@click.pass_context
def main(ctx, verbose: bool, no_open: bool, pub_alias: str | None, list_pubs: bool):
    """ZDC Reference CLI - routes, weather, charts and pubs for vZDC.

    Examples:

        zdc chart IAD ILS 1R     - Open the ILS RWY 1R chart

        zdc IAD ILS 1R           - Same as above (implicit chart command)

        zdc weather DCA          - METAR and TAF for DCA

        zdc route IAD BOS        - FAA preferred routes

        zdc -p green_dragon      - Open a bookmarked pub
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["no_open"] = no_open

    if verbose:
        click.echo("vZDC initialized", err=True)

    if list_pubs:
        do_list_pubs()
        ctx.exit()

    if pub_alias:
        do_open_pub(pub_alias, no_open=no_open)
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command(help=COMMAND_HELP["route"].strip())
@click.argument("origin")
@click.argument("destination")
@click.option("--raw", is_flag=True, help="Print the API response as JSON")
@click.pass_context
def route(ctx, origin: str, destination: str, raw: bool):
    do_route_lookup(origin, destination, raw=raw, verbose=ctx.obj["verbose"])


@main.command(help=COMMAND_HELP["metar"].strip())
@click.argument("station")
@click.option("--raw", is_flag=True, help="Dump the report when it has no raw text")
@click.option("--json", "as_json", is_flag=True, help="Print the API response as JSON")
@click.pass_context
def metar(ctx, station: str, raw: bool, as_json: bool):
    do_metar_lookup(station, raw=raw, as_json=as_json, verbose=ctx.obj["verbose"])


@main.command(help=COMMAND_HELP["taf"].strip())
@click.argument("station")
@click.option("--raw", is_flag=True, help="Dump the report when it has no raw text")
@click.option("--json", "as_json", is_flag=True, help="Print the API response as JSON")
@click.pass_context
def taf(ctx, station: str, raw: bool, as_json: bool):
    do_taf_lookup(station, raw=raw, as_json=as_json, verbose=ctx.obj["verbose"])


@main.command(help=COMMAND_HELP["weather"].strip())
@click.argument("station")
@click.option("--raw", is_flag=True, help="Dump reports that have no raw text")
@click.option("--json", "as_json", is_flag=True, help="Print the API responses as JSON")
@click.pass_context
def weather(ctx, station: str, raw: bool, as_json: bool):
    do_weather_lookup(station, raw=raw, as_json=as_json, verbose=ctx.obj["verbose"])


@main.command(help=COMMAND_HELP["chart"].strip())
@click.argument("airport")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--link", "-l", "link_only", is_flag=True, help="Output PDF URL only (don't open)"
)
@click.pass_context
def chart(ctx, airport: str, query: tuple[str, ...], link_only: bool):
    do_chart_lookup(
        airport,
        query,
        link_only=link_only,
        auto_open=not ctx.obj["no_open"],
        verbose=ctx.obj["verbose"],
    )


@main.command("list", help=COMMAND_HELP["list"].strip())
@click.argument("airport")
@click.argument("chart_type", required=False, default=None)
def list_cmd(airport: str, chart_type: str | None):
    do_list_charts(airport, chart_type)


if __name__ == "__main__":
    main()
