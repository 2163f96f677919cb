"""Tests for the application context and the command-line client."""

from __future__ import annotations

import json

import pytest

from stationaccess.app import create_app_context
from stationaccess.cache.store import QueryCache
from stationaccess.cli import main, parse_args, run
from stationaccess.core.config import ApiConfig, GeolocationConfig, Settings
from stationaccess.submission.geolocation import StaticGeolocationProvider
from stationaccess.views.panels import ReportListPanel


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _settings(**overrides) -> Settings:
    defaults = {
        "api": ApiConfig(base_url="http://testserver", max_retries=0),
        "geolocation": GeolocationConfig(provider="none"),
    }
    defaults.update(overrides)
    return Settings(**defaults)


REPORTS = [
    {"id": 1, "station_city": "Edmonton", "station_name": "Central", "issue_category": "Vandalism",
     "urgency_level": "Low", "status": "Submitted", "created_date": "2024-01-01"},
    {"id": 2, "station_city": "Calgary", "station_name": "Tuscany", "issue_category": "Broken Elevator",
     "urgency_level": "Critical", "status": "In Progress", "created_date": "2024-02-01",
     "created_by": "ops@example.com"},
]


# ---------------------------------------------------------------------------
# App context
# ---------------------------------------------------------------------------

class TestAppContext:
    @pytest.mark.asyncio
    async def test_wires_components(self, clock):
        cache = QueryCache(clock=clock)
        context = create_app_context(_settings(), cache=cache)
        try:
            assert context.cache is cache
            assert context.catalog.cities == ["Edmonton", "Calgary"]
            assert isinstance(context.report_list(), ReportListPanel)
            assert context.report_detail(None).enabled is False
        finally:
            await context.close()

    @pytest.mark.asyncio
    async def test_geolocation_from_settings(self):
        settings = _settings(geolocation=GeolocationConfig(provider="static", latitude=1.0, longitude=2.0))
        context = create_app_context(settings)
        try:
            payload = await context.submissions.build(
                context.report_form().draft.model_copy(update={
                    "station_city": "Edmonton",
                    "station_name": "Central",
                    "issue_category": "Other",
                    "description": "Loose tile",
                })
            )
            assert payload.fields["latitude"] == "1.0"
        finally:
            await context.close()

    @pytest.mark.asyncio
    async def test_explicit_geolocation_overrides_settings(self):
        provider = StaticGeolocationProvider(5.0, 6.0)
        context = create_app_context(_settings(), geolocation=provider)
        try:
            assert context.submissions._geolocation is provider
        finally:
            await context.close()


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class TestParseArgs:
    def test_list_defaults(self):
        args = parse_args(["list"])
        assert args.command == "list"
        assert args.sort == "created_date:desc"
        assert args.city is None

    def test_submit_requires_fields(self):
        with pytest.raises(SystemExit):
            parse_args(["submit", "--city", "Edmonton"])

    def test_update_status_choices(self):
        with pytest.raises(SystemExit):
            parse_args(["update", "3", "--status", "Escalated"])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestRun:
    @pytest.mark.asyncio
    async def test_list_sorted_by_urgency(self, httpx_mock, capsys):
        httpx_mock.add_response(method="GET", json=REPORTS)
        context = create_app_context(_settings())
        try:
            code = await run(parse_args(["list", "--sort", "urgency_level:desc"]), context)
        finally:
            await context.close()
        assert code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("#2")
        assert "by ops" in lines[0]
        assert lines[1].startswith("#1")

    @pytest.mark.asyncio
    async def test_list_empty(self, httpx_mock, capsys):
        httpx_mock.add_response(method="GET", json=[])
        context = create_app_context(_settings())
        try:
            assert await run(parse_args(["list", "--city", "Calgary"]), context) == 0
        finally:
            await context.close()
        assert "No reports match" in capsys.readouterr().out
        assert httpx_mock.get_request().url.params["city"] == "Calgary"

    @pytest.mark.asyncio
    async def test_stats(self, httpx_mock, capsys):
        httpx_mock.add_response(
            url="http://testserver/reports/stats",
            method="GET",
            json={"total": 10, "by_status": {"Resolved": 3}, "by_category": {"Other": 10}},
        )
        context = create_app_context(_settings())
        try:
            assert await run(parse_args(["stats"]), context) == 0
        finally:
            await context.close()
        out = capsys.readouterr().out
        assert "Total reports:   10" in out
        assert "(30.0%)" in out
        assert "By category:" in out

    @pytest.mark.asyncio
    async def test_show_missing_report(self, httpx_mock, capsys):
        httpx_mock.add_response(method="GET", status_code=404, text="Not Found")
        context = create_app_context(_settings())
        try:
            assert await run(parse_args(["show", "77"]), context) == 1
        finally:
            await context.close()
        assert "report 77 not found" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_submit(self, httpx_mock, capsys):
        httpx_mock.add_response(url="http://testserver/reports", method="POST", json={"id": 42})
        context = create_app_context(_settings())
        args = parse_args([
            "submit", "--city", "Edmonton", "--station", "Central",
            "--category", "Broken Elevator", "--description", "Out of service",
        ])
        try:
            assert await run(args, context) == 0
        finally:
            await context.close()
        assert "Submitted report 42" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_submit_rejects_station_from_other_city(self, httpx_mock, capsys):
        context = create_app_context(_settings())
        args = parse_args([
            "submit", "--city", "Calgary", "--station", "Clareview",
            "--category", "Other", "--description", "Wrong line",
        ])
        try:
            assert await run(args, context) == 1
        finally:
            await context.close()
        assert "station_name" in capsys.readouterr().out
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_submit_oversized_photo(self, httpx_mock, capsys, tmp_path):
        photo = tmp_path / "huge.jpg"
        photo.write_bytes(b"x" * (10 * 1024 * 1024 + 1))
        context = create_app_context(_settings())
        args = parse_args([
            "submit", "--city", "Edmonton", "--station", "Central",
            "--category", "Other", "--description", "Big photo", "--photo", str(photo),
        ])
        try:
            assert await run(args, context) == 1
        finally:
            await context.close()
        assert "File size must be less than 10MB" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_submit_missing_photo_path(self, httpx_mock, capsys, tmp_path):
        context = create_app_context(_settings())
        args = parse_args([
            "submit", "--city", "Edmonton", "--station", "Central",
            "--category", "Other", "--description", "No photo",
            "--photo", str(tmp_path / "missing.jpg"),
        ])
        try:
            assert await run(args, context) == 1
        finally:
            await context.close()
        out = capsys.readouterr().out
        assert out.startswith("ERROR: cannot read photo")
        assert "missing.jpg" in out
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_update(self, httpx_mock, capsys):
        httpx_mock.add_response(
            url="http://testserver/reports/5", method="PATCH", json={"id": 5, "status": "Resolved"}
        )
        context = create_app_context(_settings())
        try:
            code = await run(parse_args(["update", "5", "--status", "Resolved"]), context)
        finally:
            await context.close()
        assert code == 0
        assert "Updated report 5: Resolved" in capsys.readouterr().out
        assert json.loads(httpx_mock.get_request().content) == {"status": "Resolved"}

    @pytest.mark.asyncio
    async def test_update_without_changes(self, httpx_mock, capsys):
        context = create_app_context(_settings())
        try:
            assert await run(parse_args(["update", "5"]), context) == 1
        finally:
            await context.close()
        assert "Nothing to update" in capsys.readouterr().out


def test_main_exit_code(httpx_mock, monkeypatch, capsys):
    monkeypatch.setenv("STATIONACCESS_API_BASE_URL", "http://testserver")
    monkeypatch.setenv("STATIONACCESS_API_MAX_RETRIES", "0")
    monkeypatch.setenv("STATIONACCESS_GEOLOCATION_PROVIDER", "none")
    httpx_mock.add_response(url="http://testserver/reports/stats", method="GET", json={"total": 0})
    with pytest.raises(SystemExit) as excinfo:
        main(["stats"])
    assert excinfo.value.code == 0
    assert "Total reports:   0" in capsys.readouterr().out
