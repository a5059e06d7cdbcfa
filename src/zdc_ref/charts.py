"""Chart lookup functionality for ZDC Reference CLI."""

import json
import re
import sys
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from enum import Enum

from .config import CHARTS_USER_AGENT, HTTP_TIMEOUT_SECONDS, PDF_TIMEOUT_SECONDS
from .fuzzy import RUNWAY_PREFIXES


class ChartType(Enum):
    """Types of aviation charts."""

    SID = "sid"  # Standard Instrument Departure
    STAR = "star"  # Standard Terminal Arrival Route
    IAP = "iap"  # Instrument Approach Procedure
    APD = "apd"  # Airport Diagram
    UNKNOWN = "unknown"


# API category -> chart code
CHART_CATEGORY_CODES = {
    "airport_diagram": "APD",
    "departure": "DP",
    "arrival": "STAR",
    "approach": "IAP",
    "general": "GEN",
}

CHART_CODE_TYPES = {
    "DP": ChartType.SID,
    "STAR": ChartType.STAR,
    "IAP": ChartType.IAP,
    "APD": ChartType.APD,
}

# City names used in procedure titles named after the airport ("IAD1" -> "DULLES ONE")
AIRPORT_NAMES = {
    "IAD": "DULLES",
    "DCA": "WASHINGTON",
    "BWI": "BALTIMORE",
    "RIC": "RICHMOND",
    "ORF": "NORFOLK",
    "RDU": "RALEIGH",
    "OAK": "OAKLAND",
}

NUMBER_WORDS = {
    "1": "ONE",
    "2": "TWO",
    "3": "THREE",
    "4": "FOUR",
    "5": "FIVE",
    "6": "SIX",
    "7": "SEVEN",
    "8": "EIGHT",
    "9": "NINE",
}

TITLE_KEYS = ("chart_name", "title", "name", "chartTitle", "chart_title")
PDF_KEYS = ("pdf_url", "pdf", "pdf_path", "pdf_name", "file", "filename", "href", "link")

CONTINUATION_MARKER = ", CONT."


def infer_chart_type(chart_name: str) -> ChartType:
    """Infer the chart type from naming conventions."""
    name = chart_name.upper()

    # IAPs have specific indicators
    if any(
        x in name for x in ["ILS", "LOC", "VOR", "RNAV", "RNP", "GPS", "NDB", "RWY"]
    ):
        return ChartType.IAP

    if "DIAGRAM" in name:
        return ChartType.APD

    # STARs often have ARRIVAL in name
    if "ARRIVAL" in name or "ARR" in name or "STAR" in name:
        return ChartType.STAR

    if "DEPARTURE" in name or "DEP" in name or "SID" in name:
        return ChartType.SID

    return ChartType.UNKNOWN


def _strip_k_prefix(airport: str) -> str:
    if len(airport) == 4 and airport.startswith("K"):
        return airport[1:]
    return airport


def _normalize_chart_name(name: str, airport: str | None = None) -> str:
    """
    Normalize chart name for matching.

    Examples:
        TAXI -> AIRPORT DIAGRAM
        CNDEL5 -> CNDEL FIVE
        IAD1 (airport IAD) -> DULLES ONE
        ILS 28R -> ILS 28R (left as-is)
        ILS4 -> ILS4 (runway, split later)
    """
    name = name.strip().upper()

    if name == "TAXI":
        return "AIRPORT DIAGRAM"

    # Check if it ends with a single digit (SID/STAR pattern)
    match = re.match(r"^([A-Z]+)(\d)$", name)
    if match and match.group(1) not in RUNWAY_PREFIXES:
        base = match.group(1)
        digit = match.group(2)
        if airport and base == _strip_k_prefix(airport.upper()):
            base = AIRPORT_NAMES.get(base, base)
        return f"{base} {NUMBER_WORDS.get(digit, digit)}"

    return name


@dataclass
class ChartQuery:
    """Parsed chart query."""

    airport: str
    chart_name: str
    chart_type: ChartType = ChartType.UNKNOWN

    @classmethod
    def parse(cls, airport: str, terms: list[str] | tuple[str, ...]) -> "ChartQuery":
        """Build a query from an airport and search terms like ("CNDEL5",)."""
        airport = airport.strip().upper()
        chart_name = _normalize_chart_name(" ".join(terms), airport)
        return cls(
            airport=airport,
            chart_name=chart_name,
            chart_type=infer_chart_type(chart_name),
        )

    @property
    def tokens(self) -> list[str]:
        """Search terms to hand to the resolver."""
        return self.chart_name.split()


@dataclass(frozen=True)
class ChartCandidate:
    """One chart record returned by the charts API."""

    title: str
    pdf_ref: str
    chart_code: str = ""
    faa_ident: str = ""
    icao_ident: str = ""

    @property
    def chart_type(self) -> ChartType:
        """Map chart_code to ChartType."""
        return CHART_CODE_TYPES.get(self.chart_code.upper(), ChartType.UNKNOWN)

    @property
    def is_continuation(self) -> bool:
        """True for extra sheets titled "<base>, CONT.N"."""
        return CONTINUATION_MARKER in self.title

    @classmethod
    def from_api(
        cls,
        item: dict,
        chart_code: str = "",
        faa_ident: str = "",
        icao_ident: str = "",
    ) -> "ChartCandidate | None":
        """Validate one API record; returns None when title or PDF is missing."""
        title = _first_str(item, TITLE_KEYS).strip()
        pdf_ref = _first_str(item, PDF_KEYS).strip()
        if not title or not pdf_ref:
            return None
        return cls(
            title=title,
            pdf_ref=pdf_ref,
            chart_code=chart_code,
            faa_ident=_first_str(item, ("faa_ident", "faa", "ident")) or faa_ident,
            icao_ident=_first_str(item, ("icao_ident", "icao")) or icao_ident,
        )


def _first_str(item: dict, keys: tuple[str, ...]) -> str:
    """Return the first string value found under any of the given keys."""
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _candidates_from_list(
    items: list, chart_code: str = "", faa_ident: str = "", icao_ident: str = ""
) -> list[ChartCandidate]:
    charts = []
    for item in items:
        if not isinstance(item, dict):
            continue
        chart = ChartCandidate.from_api(item, chart_code, faa_ident, icao_ident)
        if chart is not None:
            charts.append(chart)
    return charts


def parse_charts_response(data: object) -> list[ChartCandidate]:
    """
    Turn a charts API payload into chart candidates, preserving API order.

    Understands three shapes:
      - {"airport_data": {...}, "charts": {"approach": [...], ...}}
      - [{...chart...}, ...]
      - {"KIAD": [{...chart...}, ...], ...}
    """
    if isinstance(data, list):
        return _candidates_from_list(data)

    if not isinstance(data, dict):
        return []

    charts_by_category = data.get("charts")
    if isinstance(charts_by_category, dict):
        airport_data = data.get("airport_data")
        if not isinstance(airport_data, dict):
            airport_data = {}
        top_faa = _first_str(airport_data, ("faa_ident",))
        top_icao = _first_str(airport_data, ("icao_ident",))

        charts = []
        for category, items in charts_by_category.items():
            if not isinstance(items, list):
                continue
            code = CHART_CATEGORY_CODES.get(category, category.upper())
            charts.extend(_candidates_from_list(items, code, top_faa, top_icao))
        return charts

    charts = []
    for items in data.values():
        if isinstance(items, list):
            charts.extend(_candidates_from_list(items))
    return charts


def fetch_charts_from_api(airport: str, base_url: str) -> list[ChartCandidate]:
    """
    Fetch charts for an airport from the charts API.

    Args:
        airport: FAA or ICAO airport identifier (e.g., "IAD" or "KIAD")
        base_url: Charts API base (e.g., "https://api-v2.aviationapi.com/v2")

    Returns:
        List of ChartCandidate objects, empty on any failure.
    """
    query = urllib.parse.urlencode({"airport": airport.upper()})
    url = f"{base_url.rstrip('/')}/charts?{query}"
    request = urllib.request.Request(url, headers={"User-Agent": CHARTS_USER_AGENT})

    try:
        with urllib.request.urlopen(request, timeout=HTTP_TIMEOUT_SECONDS) as response:
            data = json.loads(response.read().decode())
    except urllib.error.HTTPError as e:
        # Unknown airports come back as 404
        if e.code != 404:
            print(f"Charts API returned HTTP {e.code} for {airport}", file=sys.stderr)
        return []
    except (urllib.error.URLError, OSError) as e:
        # OSError covers timeouts and resets while reading the body
        print(f"Error fetching charts from API: {e}", file=sys.stderr)
        return []
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"Error parsing API response: {e}", file=sys.stderr)
        return []

    return parse_charts_response(data)


def fetch_charts_with_fallback(
    airport: str, base_url: str
) -> tuple[str, list[ChartCandidate]]:
    """
    Fetch charts, retrying once as "K" + id for 3-letter domestic identifiers.

    Returns:
        Tuple of (airport id that produced the charts, charts).
    """
    airport = airport.strip().upper()
    charts = fetch_charts_from_api(airport, base_url)
    if not charts and len(airport) == 3 and not airport.startswith("K"):
        icao = f"K{airport}"
        charts = fetch_charts_from_api(icao, base_url)
        if charts:
            return icao, charts
    return airport, charts


def find_all_chart_pages(
    charts: list[ChartCandidate],
    base_chart: ChartCandidate,
) -> list[ChartCandidate]:
    """
    Find all pages of a chart (main page + continuation pages).

    Args:
        charts: List of all charts for the airport
        base_chart: The main chart to find pages for

    Returns:
        List of charts for all pages, sorted by page order.
        The base chart is first, followed by CONT.1, CONT.2, etc.
    """
    base_name = base_chart.title

    # If this is already a continuation page, find the real base
    if CONTINUATION_MARKER in base_name:
        base_name = base_name.split(CONTINUATION_MARKER)[0]

    pages = []
    for chart in charts:
        if chart.title == base_name:
            pages.append((0, chart))
        elif chart.title.startswith(f"{base_name}{CONTINUATION_MARKER}"):
            try:
                cont_num = int(chart.title.split(CONTINUATION_MARKER)[1].strip())
                pages.append((cont_num, chart))
            except (IndexError, ValueError):
                # If we can't parse it, add at the end
                pages.append((999, chart))

    # Stable, so duplicate page numbers keep API order
    pages.sort(key=lambda x: x[0])
    return [chart for _, chart in pages]


def absolute_pdf_url(base_url: str, pdf_ref: str) -> str:
    """
    Resolve a chart's PDF reference against the charts base URL.

    Examples (base "https://api-v2.aviationapi.com/v2"):
        "https://x/a.pdf" -> unchanged
        "//x/a.pdf" -> "https://x/a.pdf"
        "/charts/a.pdf" -> "https://api-v2.aviationapi.com/charts/a.pdf"
        "a.pdf" -> "https://api-v2.aviationapi.com/a.pdf"
    """
    ref = pdf_ref.strip()
    if ref.startswith(("http://", "https://", "file://")):
        return ref
    if ref.startswith("//"):
        return f"https:{ref}"

    # Files live beside the versioned API, not under it
    parts = urllib.parse.urlsplit(base_url.strip())
    path = re.sub(r"/v\d+(?:/.*)?$", "", parts.path.rstrip("/"))
    base = urllib.parse.urlunsplit((parts.scheme, parts.netloc, path, "", ""))
    base = base.rstrip("/")

    if ref.startswith("/"):
        return f"{base}{ref}"
    return f"{base}/{ref}"


def sanitize_chart_filename(airport: str, chart_name: str) -> str:
    """Convert a chart title to a clean temp filename.

    "ILS OR LOC RWY 01R" at IAD -> "ZDC_IAD_ILS_OR_LOC_RWY_01R.pdf"
    """
    name = re.sub(r"[^\w\s-]", "", chart_name.upper())
    name = re.sub(r"\s+-\s+", " ", name)
    name = re.sub(r"\s+", "_", name.strip()).strip("_")
    return f"ZDC_{airport.upper()}_{name}.pdf"


def download_pdf(pdf_url: str) -> bytes | None:
    """Download a PDF; returns None on failure."""
    try:
        request = urllib.request.Request(
            pdf_url, headers={"User-Agent": CHARTS_USER_AGENT}
        )
        with urllib.request.urlopen(request, timeout=PDF_TIMEOUT_SECONDS) as response:
            return response.read()
    except (urllib.error.URLError, OSError) as e:
        print(f"Error downloading {pdf_url}: {e}", file=sys.stderr)
        return None


def download_and_merge_pdfs(pdf_urls: list[str], output_path: str) -> bool:
    """
    Download multiple PDFs and merge them into one file.

    Args:
        pdf_urls: List of PDF URLs to download and merge, in page order
        output_path: Path to save the merged PDF

    Returns:
        True if successful, False otherwise.
    """
    import io

    from pypdf import PdfReader, PdfWriter
    from pypdf.errors import PdfReadError

    if not pdf_urls:
        return False

    writer = PdfWriter()
    for url in pdf_urls:
        pdf_data = download_pdf(url)
        if pdf_data is None:
            return False
        try:
            reader = PdfReader(io.BytesIO(pdf_data))
        except PdfReadError as e:
            print(f"Error reading {url}: {e}", file=sys.stderr)
            return False
        for page in reader.pages:
            writer.add_page(page)

    with open(output_path, "wb") as f:
        writer.write(f)

    return True
