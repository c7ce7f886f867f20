"""
pytest configuration and shared fixtures for the RisqMap backend tests.

Settings are read from the environment at import time, so the SQLite
snapshot database, log directory and incidents source are pointed at a
throwaway directory BEFORE anything under backend.app is imported.
"""

import os
import tempfile

import pytest
from httpx import ASGITransport, AsyncClient

_TMP = tempfile.mkdtemp(prefix="risqmap-tests-")
os.environ.setdefault("RISQMAP_DB_PATH", os.path.join(_TMP, "metrics.sqlite3"))
os.environ.setdefault("RISQMAP_LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("RISQMAP_INCIDENTS_PATH", os.path.join(_TMP, "missing_incidents.json"))

from backend.app.schemas import HistoricalIncident  # noqa: E402


def make_incident(id, date, severity=5, status="resolved", type="Flood",
                  location="NJ, Mercer", description="", **extra):
    return HistoricalIncident(
        id=id, date=date, severity=severity, status=status, type=type,
        location=location, description=description, **extra,
    )


@pytest.fixture()
def incidents():
    return [
        make_incident("a", "2024-01-05T09:00:00Z", severity=8, reported_losses=1000,
                      evacuees=40, description="River overtopped levee"),
        make_incident("b", "2024-01-05T18:00:00", severity=6, status="ongoing",
                      type="Flash Flood", location="NY, Albany", evacuees=10),
        make_incident("c", "2024-01-20T12:00:00Z", severity=5, status="monitoring",
                      type="Heavy Rain", location="MS, Warren"),
        make_incident("d", "2023-12-31T10:00:00Z", severity=9, reported_losses=500,
                      type="Hurricane", location="LA, Orleans"),
    ]


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app.
    """
    from backend.app.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def empty_snapshots():
    """
    Clears the metrics_snapshots table around a test that persists snapshots,
    so later tests still fall back to the synthetic baseline.
    """
    from backend.app.db_helpers import ensure_db
    from backend.app.db_models import MetricsSnapshot, SessionLocal

    def clear():
        ensure_db()
        db = SessionLocal()
        try:
            db.query(MetricsSnapshot).delete()
            db.commit()
        finally:
            db.close()

    clear()
    yield
    clear()
