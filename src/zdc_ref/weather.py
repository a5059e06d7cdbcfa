"""METAR/TAF lookups against the aviationweather.gov data API."""

import json
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime, timezone

from .config import AWC_API_URL, HTTP_TIMEOUT_SECONDS

# 1 hPa in inches of mercury
HPA_TO_INHG = 0.029529983071445


class WeatherApiError(Exception):
    """The weather API answered with an error or could not be reached."""


def fetch_awc(endpoint: str, ids: str, fmt: str = "json") -> object:
    """
    Fetch data from the aviationweather.gov API.

    Args:
        endpoint: API endpoint ("metar" or "taf")
        ids: Station identifier(s), comma separated
        fmt: "json" or "raw"

    Returns:
        Parsed JSON, or the response text for fmt="raw".
    """
    query = urllib.parse.urlencode({"ids": ids, "format": fmt})
    url = f"{AWC_API_URL}/{endpoint}?{query}"

    try:
        with urllib.request.urlopen(url, timeout=HTTP_TIMEOUT_SECONDS) as response:
            body = response.read().decode()
    except urllib.error.HTTPError as e:
        detail = e.read().decode(errors="replace")
        raise WeatherApiError(f"api error {e.code}: {detail}") from e
    except urllib.error.URLError as e:
        raise WeatherApiError(f"request failed: {e.reason}") from e
    except OSError as e:
        raise WeatherApiError(f"request failed: {e}") from e
    except UnicodeDecodeError as e:
        raise WeatherApiError(f"invalid response: {e}") from e

    if fmt == "raw":
        return body
    # No reports for the station comes back as an empty body
    if not body.strip():
        return []
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise WeatherApiError(f"invalid response: {e}") from e


def as_list(data: object) -> list:
    """Normalize an API payload into a list of report objects."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if "data" in data:
            inner = data["data"]
            return inner if isinstance(inner, list) else [inner]
        return [data]
    if data is None:
        return []
    return [data]


def fetch_station_reports(endpoint: str, station: str) -> tuple[str, list]:
    """
    Fetch reports for a station, retrying as "K" + id for 3-letter ids.

    Returns:
        Tuple of (station id that was queried last, reports).
    """
    station = station.strip().upper()
    reports = as_list(fetch_awc(endpoint, station))
    if not reports and len(station) == 3 and not station.startswith("K"):
        station = f"K{station}"
        reports = as_list(fetch_awc(endpoint, station))
    return station, reports


# --- Field formatting ---


def get_str_field(report: dict, key: str) -> str | None:
    """Read a field as text; numbers are stringified, anything else is None."""
    value = report.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def format_unix(ts: int) -> str:
    """Format a unix timestamp as "YYYY-MM-DD HH:MM UTC"."""
    try:
        dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(ts)
    return dt.strftime("%Y-%m-%d %H:%M UTC")


def format_time_field(report: dict, key: str) -> str:
    ts = _as_int(report.get(key))
    return format_unix(ts) if ts is not None else ""


def c_to_f(c: float) -> float:
    return c * 9.0 / 5.0 + 32.0


def format_wind(report: dict) -> str:
    """Format wind as e.g. "280 12 kt G20 kt"; "VRB" directions pass through."""
    parts = []
    wdir = report.get("wdir")
    if isinstance(wdir, str):
        parts.append(wdir)
    elif _as_int(wdir) is not None:
        parts.append(str(_as_int(wdir)))

    wspd = _as_float(report.get("wspd"))
    if wspd is not None:
        parts.append(f"{round(wspd)} kt")
    wgst = _as_float(report.get("wgst"))
    if wgst is not None:
        parts.append(f"G{round(wgst)} kt")
    return " ".join(parts)


def format_visibility(report: dict) -> str:
    value = report.get("visib")
    if isinstance(value, str):
        return value
    number = _as_float(value)
    if number is None:
        return ""
    return str(int(number)) if number.is_integer() else str(number)


def format_temperature(report: dict) -> str:
    """Format temperature/dewpoint in Celsius with Fahrenheit in parentheses."""
    temp = _as_float(report.get("temp"))
    dewp = _as_float(report.get("dewp"))
    if temp is None:
        return ""
    if dewp is None:
        return f"{temp:.1f}°C ({c_to_f(temp):.0f}°F)"
    return (
        f"{temp:.1f}°C/{dewp:.1f}°C "
        f"({c_to_f(temp):.0f}°F/{c_to_f(dewp):.0f}°F)"
    )


def format_altimeter(report: dict) -> str:
    """Format altimeter setting in both hPa and inHg.

    Values of 50 and above are taken to be hPa, smaller values inHg.
    """
    altim = _as_float(report.get("altim"))
    if altim is None:
        return ""
    if altim >= 50.0:
        return f"{altim:.1f} hPa ({altim * HPA_TO_INHG:.2f} inHg)"
    return f"{altim:.2f} inHg ({altim / HPA_TO_INHG:.1f} hPa)"


def format_clouds(report: dict) -> str:
    """Format cloud layers as e.g. "FEW050, BKN250"."""
    clouds = report.get("clouds")
    if not isinstance(clouds, list):
        return ""

    layers = []
    for layer in clouds:
        if not isinstance(layer, dict):
            continue
        cover = layer.get("cover") if isinstance(layer.get("cover"), str) else ""
        base = layer.get("base")
        if _as_int(base) is not None:
            layers.append(f"{cover}{_as_int(base)}")
        elif _as_float(base) is not None:
            layers.append(f"{cover}{base}")
        else:
            layers.append(cover)
    return ", ".join(layers)
