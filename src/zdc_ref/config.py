"""Centralized configuration for ZDC Reference CLI."""

import os
from pathlib import Path

# =============================================================================
# Charts API
# =============================================================================
DEFAULT_CHARTS_BASE = "https://api-v2.aviationapi.com/v2"
CHARTS_BASE_ENV = "ZDC_CHARTS_BASE"
CHARTS_USER_AGENT = "ZDC-Chart-CLI/1.0"

# =============================================================================
# Other APIs
# =============================================================================
AWC_API_URL = "https://aviationweather.gov/api/data"
PREFERRED_ROUTES_URL = "https://api.aviationapi.com/v1/preferred-routes/search"

HTTP_TIMEOUT_SECONDS = 10
PDF_TIMEOUT_SECONDS = 30

# =============================================================================
# Pubs config
# =============================================================================
CONFIG_ENV = "ZDC_CONFIG"
CONFIG_DIR_NAME = "zdc"
CONFIG_FILE_NAME = "pubs.toml"

DEFAULT_PUBS = {
    "the_fox": "https://example.com/the_fox",
    "green_dragon": "https://example.com/green_dragon",
}


def get_charts_base() -> str:
    """Charts API base URL, honoring the ZDC_CHARTS_BASE override."""
    return os.environ.get(CHARTS_BASE_ENV) or DEFAULT_CHARTS_BASE


def get_config_path() -> Path:
    """Location of the pubs TOML file.

    Checked in order: $ZDC_CONFIG, $XDG_CONFIG_HOME/zdc/pubs.toml,
    ~/.config/zdc/pubs.toml.
    """
    explicit = os.environ.get(CONFIG_ENV)
    if explicit:
        return Path(explicit)

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    return Path.home() / ".config" / CONFIG_DIR_NAME / CONFIG_FILE_NAME
