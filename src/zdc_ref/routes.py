"""Preferred route lookup against the aviationapi.com routes API."""

import json
import urllib.error
import urllib.parse
import urllib.request

from .config import HTTP_TIMEOUT_SECONDS, PREFERRED_ROUTES_URL


class RoutesApiError(Exception):
    """The routes API answered with an error or could not be reached."""


def normalize_route_airport(airport: str) -> str:
    """Routes are keyed by FAA id, so drop a leading K ("KIAD" -> "IAD")."""
    airport = airport.strip()
    if airport[:1].upper() == "K":
        airport = airport[1:]
    return airport.upper()


def build_routes_url(origin: str, destination: str) -> str:
    query = urllib.parse.urlencode({"origin": origin, "dest": destination})
    return f"{PREFERRED_ROUTES_URL}?{query}"


def fetch_preferred_routes(origin: str, destination: str) -> list:
    """
    Fetch FAA preferred routes between two airports.

    Args:
        origin: Normalized departure airport (e.g., "IAD")
        destination: Normalized arrival airport (e.g., "BOS")

    Returns:
        List of route rows as returned by the API.
    """
    url = build_routes_url(origin, destination)

    try:
        with urllib.request.urlopen(url, timeout=HTTP_TIMEOUT_SECONDS) as response:
            data = json.loads(response.read().decode())
    except urllib.error.HTTPError as e:
        detail = e.read().decode(errors="replace")
        raise RoutesApiError(f"api error {e.code}: {detail}") from e
    except urllib.error.URLError as e:
        raise RoutesApiError(f"request failed: {e.reason}") from e
    except OSError as e:
        raise RoutesApiError(f"request failed: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RoutesApiError(f"invalid response: {e}") from e

    if isinstance(data, list):
        return data
    return [data]


def route_columns(rows: list) -> list[str]:
    """Sorted union of keys across all rows; non-object rows use "value"."""
    keys = set()
    for row in rows:
        if isinstance(row, dict):
            keys.update(row.keys())
        else:
            keys.add("value")
    return sorted(keys)


def format_route_cell(value: object) -> str:
    """Render one API value for table display."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(
            v if isinstance(v, str) else json.dumps(v) for v in value
        )
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def route_rows(rows: list, columns: list[str]) -> list[list[str]]:
    """Build table cells for each row in column order."""
    table = []
    for row in rows:
        if isinstance(row, dict):
            table.append([format_route_cell(row.get(col)) for col in columns])
        else:
            table.append([format_route_cell(row) for _ in columns])
    return table
