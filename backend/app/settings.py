# backend/app/settings.py
"""
Environment-driven configuration for the RisqMap metrics backend.
Values are read once at import time.
"""

import os
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]

# incident source: NOAA storm events CSV or a JSON list of incidents
INCIDENTS_PATH = Path(os.getenv("RISQMAP_INCIDENTS_PATH", ROOT / "data" / "historical_incidents.json"))
DB_PATH = Path(os.getenv("RISQMAP_DB_PATH", ROOT / "data" / "risqmap_metrics.sqlite3"))

LOG_DIR = os.getenv("RISQMAP_LOG_DIR", "logs")
LOG_LEVEL = os.getenv("RISQMAP_LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("RISQMAP_CORS_ORIGINS", "*").split(",") if o.strip()]

INCIDENT_LIMIT = int(os.getenv("RISQMAP_INCIDENT_LIMIT", "5000"))
