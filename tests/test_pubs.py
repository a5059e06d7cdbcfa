"""
Tests for the pubs config file and alias lookup.
"""

import tomllib
from pathlib import Path

import click
import pytest

from zdc_ref.config import DEFAULT_PUBS, get_charts_base, get_config_path
from zdc_ref.pubs import find_pub, load_or_create_pubs, normalize_alias


class TestNormalizeAlias:
    def test_separators_and_case(self):
        assert normalize_alias("Green-Dragon") == "green_dragon"
        assert normalize_alias("the fox") == "the_fox"


class TestLoadOrCreatePubs:
    """Tests for reading and creating the pubs TOML file."""

    def test_creates_default(self, tmp_path):
        path = tmp_path / "zdc" / "pubs.toml"

        pubs = load_or_create_pubs(path)

        assert pubs == DEFAULT_PUBS
        with open(path, "rb") as f:
            assert tomllib.load(f) == {"pubs": DEFAULT_PUBS}

    def test_reads_existing(self, tmp_path):
        path = tmp_path / "pubs.toml"
        path.write_text('[pubs]\nsop = "https://example.com/sop.pdf"\n', encoding="utf-8")

        assert load_or_create_pubs(path) == {"sop": "https://example.com/sop.pdf"}

    def test_missing_table(self, tmp_path):
        path = tmp_path / "pubs.toml"
        path.write_text("", encoding="utf-8")

        assert load_or_create_pubs(path) == {}

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "pubs.toml"
        path.write_text("[pubs\n", encoding="utf-8")

        with pytest.raises(click.ClickException, match="Failed to parse"):
            load_or_create_pubs(path)

    def test_pubs_not_a_table(self, tmp_path):
        path = tmp_path / "pubs.toml"
        path.write_text('pubs = "nope"\n', encoding="utf-8")

        with pytest.raises(click.ClickException, match="must be a table"):
            load_or_create_pubs(path)


class TestFindPub:
    def test_lookup_ignores_case_and_separators(self):
        pubs = {"Green_Dragon": "https://example.com/green_dragon"}

        assert find_pub(pubs, "green-dragon") == "https://example.com/green_dragon"
        assert find_pub(pubs, "GREEN DRAGON") == "https://example.com/green_dragon"
        assert find_pub(pubs, "red_dragon") is None


class TestConfigPaths:
    """Tests for environment overrides."""

    def test_explicit_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ZDC_CONFIG", str(tmp_path / "mine.toml"))
        assert get_config_path() == tmp_path / "mine.toml"

    def test_xdg_path(self, monkeypatch, tmp_path):
        monkeypatch.delenv("ZDC_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "zdc" / "pubs.toml"

    def test_home_path(self, monkeypatch):
        monkeypatch.delenv("ZDC_CONFIG", raising=False)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_config_path() == Path.home() / ".config" / "zdc" / "pubs.toml"

    def test_charts_base(self, monkeypatch):
        monkeypatch.delenv("ZDC_CHARTS_BASE", raising=False)
        assert get_charts_base() == "https://api-v2.aviationapi.com/v2"

        monkeypatch.setenv("ZDC_CHARTS_BASE", "https://charts.example.com/v1")
        assert get_charts_base() == "https://charts.example.com/v1"
