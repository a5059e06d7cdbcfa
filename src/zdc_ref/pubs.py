"""Bookmarked publication links ("pubs") stored in a TOML file."""

import json
import tomllib
from pathlib import Path

import click

from .config import DEFAULT_PUBS


def normalize_alias(alias: str) -> str:
    """Normalize a pub alias: "Green-Dragon" -> "green_dragon"."""
    return alias.strip().lower().replace("-", "_").replace(" ", "_")


def _render_pubs_toml(pubs: dict[str, str]) -> str:
    lines = ["[pubs]"]
    for alias, url in pubs.items():
        # JSON string escaping is valid TOML basic-string escaping
        lines.append(f"{json.dumps(alias)} = {json.dumps(url)}")
    return "\n".join(lines) + "\n"


def load_or_create_pubs(path: Path) -> dict[str, str]:
    """
    Load pubs from the config file, writing a default one if it is missing.

    Returns:
        Mapping of alias -> URL, in file order.
    """
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_render_pubs_toml(DEFAULT_PUBS), encoding="utf-8")
        return dict(DEFAULT_PUBS)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise click.ClickException(f"Failed to parse {path}: {e}") from e

    pubs = data.get("pubs", {})
    if not isinstance(pubs, dict):
        raise click.ClickException(f"{path}: [pubs] must be a table of alias = url")

    return {str(alias): str(url) for alias, url in pubs.items()}


def find_pub(pubs: dict[str, str], alias: str) -> str | None:
    """Look up a pub URL by alias, ignoring case and -/_/space differences."""
    wanted = normalize_alias(alias)
    for name, url in pubs.items():
        if normalize_alias(name) == wanted:
            return url
    return None
