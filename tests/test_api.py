"""
test_api.py — HTTP surface of the metrics backend.

Incident-backed routes get their data through the get_incidents dependency,
which is overridden with the shared `incidents` fixture.
"""

import pytest

from backend.app.api import get_incidents
from backend.app.db_helpers import get_latest_snapshot


@pytest.fixture()
async def stats_client(client, incidents):
    from backend.app.main import app

    app.dependency_overrides[get_incidents] = lambda: incidents
    yield client


FEED = {
    "waterLevelPosts": [
        {"id": "1", "name": "Delaware River @ Trenton", "lat": 40.22, "lon": -74.77,
         "water_level": 2.7, "status": "Danger", "timestamp": "1999-01-01T00:00:00Z"},
        {"id": "2", "name": "Hudson River @ Trenton", "lat": 42.65, "lon": -73.75, "status": "Normal"},
    ],
    "pumpData": [{"id": "p1", "location": "Camden", "latitude": 39.9, "longitude": -75.1,
                  "condition": "Operating"}],
    "alerts": [{"id": "a1", "level": "danger", "isActive": True, "affectedAreas": ["Camden", "Trenton"]}],
}


class TestHealth:
    async def test_root(self, client):
        r = await client.get("/")
        assert r.status_code == 200

    async def test_health(self, client):
        assert (await client.get("/health")).json() == {"status": "ok"}

    async def test_health_details_keys(self, client):
        data = (await client.get("/health/details")).json()
        for key in ("status", "incidents_file_exists", "db_file_exists", "last_snapshot"):
            assert key in data


class TestClassify:
    async def test_water_level_feet(self, client):
        r = await client.get("/classify/water-level", params={"level": 82, "unit": "ft"})
        assert r.status_code == 200
        assert r.json()["severity"] == "danger"

    async def test_water_level_rejects_unknown_unit(self, client):
        r = await client.get("/classify/water-level", params={"level": 1, "unit": "cm"})
        assert r.status_code == 422

    async def test_pump(self, client):
        r = await client.get("/classify/pump", params={"condition": "Scheduled Maintenance"})
        assert r.json()["status"] == "maintenance"

    async def test_pump_without_condition(self, client):
        assert (await client.get("/classify/pump")).json()["status"] == "offline"

    async def test_safe_zone(self, client):
        r = await client.get("/classify/safe-zone", params={"water_level": 0.4, "elevation": 80})
        assert r.json() == {
            "isSafe": True, "confidence": 95,
            "reason": "Low water level, no active alerts, elevated terrain",
        }


class TestMetrics:
    async def test_empty_feed(self, client):
        data = (await client.post("/metrics/dashboard", json={})).json()
        for key in ("totalRegions", "activeAlerts", "floodZones", "peopleAtRisk", "weatherStations"):
            assert data[key] == 0

    async def test_dashboard(self, client):
        data = (await client.post("/metrics/dashboard", json=FEED)).json()
        assert data["totalRegions"] == 2
        assert data["activeAlerts"] == 1
        assert data["floodZones"] == 3
        assert data["peopleAtRisk"] == 7500 + 10500
        assert data["weatherStations"] == 0

    async def test_history_with_supplied_previous(self, client):
        previous = {"totalRegions": 4, "activeAlerts": 1, "floodZones": 3, "peopleAtRisk": 9000,
                    "weatherStations": 0, "lastUpdate": "2024-01-01T00:00:00Z"}
        data = (await client.post("/metrics/history", json={**FEED, "previous": previous})).json()
        assert data["previous"]["totalRegions"] == 4
        assert data["percentChanges"]["totalRegions"] == -50
        assert data["percentChanges"]["peopleAtRisk"] == 100

    async def test_persisted_snapshot_becomes_baseline(self, client, empty_snapshots):
        assert get_latest_snapshot() is None
        first = (await client.post("/metrics/history", params={"persist": "true"}, json=FEED)).json()
        second = (await client.post("/metrics/history", json={})).json()
        assert second["previous"]["peopleAtRisk"] == first["current"]["peopleAtRisk"]
        assert second["previous"]["totalRegions"] == first["current"]["totalRegions"]
        assert second["percentChanges"]["peopleAtRisk"] == -100

        details = (await client.get("/health/details")).json()
        assert details["db_file_exists"] is True
        assert details["last_snapshot"] is not None

    async def test_history_without_stored_snapshot_uses_baseline(self, client, empty_snapshots):
        data = (await client.post("/metrics/history", json=FEED)).json()
        assert data["previous"]["peopleAtRisk"] == round(data["current"]["peopleAtRisk"] * 1.12)
        assert data["percentChanges"]["peopleAtRisk"] == -11


class TestStatistics:
    async def test_incidents_filtered_and_sorted(self, stats_client):
        r = await stats_client.get("/statistics/incidents", params={"sort_by": "severity", "order": "asc"})
        assert [i["severity"] for i in r.json()] == [5, 6, 8, 9]

    async def test_incidents_type_filter(self, stats_client):
        r = await stats_client.get("/statistics/incidents", params={"type": "flash flood"})
        assert [i["id"] for i in r.json()] == ["b"]

    async def test_chart_monthly(self, stats_client):
        data = (await stats_client.get("/statistics/chart", params={"granularity": "month"})).json()
        assert [p["name"] for p in data] == ["2023-12", "2024-01"]
        assert sum(p["incidents"] for p in data) == 4

    async def test_chart_with_window(self, stats_client):
        data = (await stats_client.get("/statistics/chart", params={
            "granularity": "day", "start": "2024-01-01T00:00:00", "end": "2024-01-10T00:00:00",
        })).json()
        assert [p["name"] for p in data] == ["2024-01-05"]
        assert data[0]["incidents"] == 2

    async def test_chart_rejects_unknown_granularity(self, stats_client):
        r = await stats_client.get("/statistics/chart", params={"granularity": "week"})
        assert r.status_code == 422

    async def test_summary(self, stats_client):
        data = (await stats_client.get("/statistics/summary")).json()
        assert data["totalIncidents"] == 4
        assert data["totalEvacuees"] == 50

    async def test_missing_source_yields_empty_summary(self, client):
        data = (await client.get("/statistics/summary")).json()
        assert data["totalIncidents"] == 0


REPORTS = [
    {"id": "r1", "location": "Trenton", "water_level": "knee-length", "created_at": "2024-03-05T14:30:00Z"},
    {"id": "r2", "location": "Camden", "water_level": "chest-length", "created_at": "2024-03-06T09:00:00Z"},
]


class TestReports:
    async def test_filter(self, client):
        data = (await client.post("/reports/filter", json={"reports": REPORTS, "level": "high"})).json()
        assert [r["id"] for r in data["reports"]] == ["r2"]
        assert data["total"] == 1
        assert data["stats"]["total"] == 2

    async def test_filter_limit(self, client):
        data = (await client.post("/reports/filter", json={"reports": REPORTS, "limit": 1})).json()
        assert [r["id"] for r in data["reports"]] == ["r2"]
        assert data["total"] == 2

    async def test_export(self, client):
        r = await client.post("/reports/export", json=REPORTS)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert "flood_report.csv" in r.headers["content-disposition"]
        assert "Knee" in r.text

    async def test_export_empty(self, client):
        assert (await client.post("/reports/export", json=[])).status_code == 400


class TestWeather:
    async def test_normalize(self, client):
        r = await client.post("/weather/normalize", json={"main": {"temp": 12}, "name": "Albany"})
        assert r.json()["source"] == "openweather"
        assert r.json()["temperature"] == 12
