# backend/app/db_helpers.py
from typing import Optional
from datetime import timezone

from .db_models import init_db, SessionLocal, MetricsSnapshot, _utcnow
from .logging_setup import logger
from .schemas import DashboardMetrics
from .time_utils import parse_timestamp, to_iso

def ensure_db():
    init_db()

def insert_snapshot(metrics: DashboardMetrics) -> bool:
    ensure_db()
    db = SessionLocal()
    try:
        computed = parse_timestamp(metrics.lastUpdate)
        record = MetricsSnapshot(
            computed_at=computed.astimezone(timezone.utc).replace(tzinfo=None) if computed else _utcnow(),
            saved_at=_utcnow(),
            total_regions=metrics.totalRegions,
            active_alerts=metrics.activeAlerts,
            flood_zones=metrics.floodZones,
            people_at_risk=metrics.peopleAtRisk,
            weather_stations=metrics.weatherStations,
        )
        db.add(record)
        db.commit()
        logger.info(f"[db_helpers] Stored metrics snapshot computed_at={metrics.lastUpdate}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"[db_helpers] insert_snapshot failed: {e}", exc_info=True)
        return False
    finally:
        db.close()

def _to_metrics(r: MetricsSnapshot) -> DashboardMetrics:
    return DashboardMetrics(
        totalRegions=r.total_regions or 0,
        activeAlerts=r.active_alerts or 0,
        floodZones=r.flood_zones or 0,
        peopleAtRisk=r.people_at_risk or 0,
        weatherStations=r.weather_stations or 0,
        lastUpdate=to_iso(r.computed_at.replace(tzinfo=timezone.utc)),
    )

def get_latest_snapshot() -> Optional[DashboardMetrics]:
    ensure_db()
    db = SessionLocal()
    try:
        r = db.query(MetricsSnapshot).order_by(MetricsSnapshot.id.desc()).first()
        return _to_metrics(r) if r else None
    except Exception as e:
        logger.error(f"[db_helpers] get_latest_snapshot failed: {e}", exc_info=True)
        return None
    finally:
        db.close()

