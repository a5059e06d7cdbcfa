"""
Tests for the preferred routes client.
"""

import io
import json
import urllib.error
import urllib.request

import pytest

from zdc_ref.routes import (
    RoutesApiError,
    build_routes_url,
    fetch_preferred_routes,
    format_route_cell,
    normalize_route_airport,
    route_columns,
    route_rows,
)


class FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class FailingResponse(FakeResponse):
    def __init__(self, error: Exception):
        super().__init__(b"")
        self._error = error

    def read(self):
        raise self._error


def test_normalize_route_airport():
    assert normalize_route_airport("kiad") == "IAD"
    assert normalize_route_airport(" KDCA ") == "DCA"
    assert normalize_route_airport("BOS") == "BOS"


def test_build_routes_url():
    assert (
        build_routes_url("IAD", "BOS")
        == "https://api.aviationapi.com/v1/preferred-routes/search?origin=IAD&dest=BOS"
    )


class TestFetchPreferredRoutes:
    def test_list_response(self, monkeypatch):
        rows = [{"origin": "IAD", "destination": "BOS", "route": "IAD JOOLI6 ..."}]
        monkeypatch.setattr(
            urllib.request,
            "urlopen",
            lambda url, timeout: FakeResponse(json.dumps(rows).encode()),
        )

        assert fetch_preferred_routes("IAD", "BOS") == rows

    def test_object_response_is_wrapped(self, monkeypatch):
        monkeypatch.setattr(
            urllib.request,
            "urlopen",
            lambda url, timeout: FakeResponse(b'{"route": "DIRECT"}'),
        )

        assert fetch_preferred_routes("IAD", "BOS") == [{"route": "DIRECT"}]

    def test_http_error(self, monkeypatch):
        def fake_urlopen(url, timeout):
            raise urllib.error.HTTPError(url, 500, "Server Error", None, io.BytesIO(b"boom"))

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        with pytest.raises(RoutesApiError, match="api error 500: boom"):
            fetch_preferred_routes("IAD", "BOS")

    def test_connection_reset_while_reading(self, monkeypatch):
        monkeypatch.setattr(
            urllib.request,
            "urlopen",
            lambda url, timeout: FailingResponse(ConnectionResetError("reset by peer")),
        )

        with pytest.raises(RoutesApiError, match="request failed: reset by peer"):
            fetch_preferred_routes("IAD", "BOS")


class TestRouteTable:
    """Tests for turning route rows into table cells."""

    def test_columns_are_sorted_union(self):
        rows = [{"route": "X", "type": "H"}, {"altitude": "FL350"}]
        assert route_columns(rows) == ["altitude", "route", "type"]

    def test_non_object_rows(self):
        assert route_columns(["IAD..BOS"]) == ["value"]

    def test_cell_formatting(self):
        assert format_route_cell(None) == ""
        assert format_route_cell(True) == "true"
        assert format_route_cell(5) == "5"
        assert format_route_cell(["JFK", "LGA"]) == "JFK, LGA"
        assert format_route_cell({"a": 1}) == '{"a": 1}'

    def test_rows_follow_columns(self):
        rows = [{"route": "X", "type": "H"}, {"altitude": "FL350"}]
        columns = route_columns(rows)
        assert route_rows(rows, columns) == [["", "X", "H"], ["FL350", "", ""]]
