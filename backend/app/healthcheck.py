# backend/app/healthcheck.py
from fastapi import APIRouter

from .db_helpers import get_latest_snapshot
from .logging_setup import logger
from .settings import INCIDENTS_PATH, DB_PATH

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/health/details")
def health_details():
    """
    Returns data-source status for dashboard/monitoring.
    """
    incidents_exists = INCIDENTS_PATH.exists()
    db_exists = DB_PATH.exists()

    last_snapshot = None
    if db_exists:
        snap = get_latest_snapshot()
        last_snapshot = snap.lastUpdate if snap else None

    if incidents_exists and db_exists:
        status = "healthy"
    elif incidents_exists or db_exists:
        status = "degraded"
    else:
        status = "inactive"

    logger.debug(f"[healthcheck] status={status}")
    return {
        "status": status,
        "incidents_file_exists": incidents_exists,
        "db_file_exists": db_exists,
        "last_snapshot": last_snapshot,
        "incidents_path": str(INCIDENTS_PATH),
        "db_path": str(DB_PATH),
    }
