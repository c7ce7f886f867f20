# backend/app/metrics_calculator.py
"""
Dashboard metrics computed from live feeds:
1. Regions monitored
2. Active alerts
3. Flood zones (coarse lat/lon grid)
4. Estimated people at risk
5. Stations reporting within the last week

Every reduction is independent and tolerant of malformed records: missing
fields are skipped, so bad data undercounts instead of raising.
"""

import math
import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .logging_setup import logger
from .schemas import (
    WaterLevelPost, PumpData, FloodAlert,
    DashboardMetrics, PercentChanges, MetricsWithHistory,
)
from .time_utils import parse_timestamp, to_iso, utcnow

# ---- Tunable Constants ----
STATION_LOCATION_RE = re.compile(r"@\s*(.+)$")
ALERT_STATUS_KEYWORDS = ("alert", "danger", "warning", "critical")

ZONE_CELL_DEG = 0.5

BASE_POPULATION_PER_STATION = 2500
POPULATION_PER_AFFECTED_AREA = 3500
ALERT_LEVEL_MULTIPLIER = {"critical": 2.0, "danger": 1.5, "warning": 1.0}

RECENT_WINDOW = timedelta(days=7)

# placeholder baseline used when no previous snapshot is available
BASELINE_FACTORS = {
    "totalRegions": 0.98,
    "activeAlerts": 1.05,
    "floodZones": 0.97,
    "peopleAtRisk": 1.12,
    "weatherStations": 0.99,
}
METRIC_FIELDS = tuple(BASELINE_FACTORS)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# ---- 1. Regions ----
def calculate_total_regions(
    water_level_posts: Iterable[WaterLevelPost],
    pump_data: Iterable[PumpData],
) -> int:
    """Distinct "@ <place>" tokens from station names plus distinct pump locations."""
    locations = set()

    for post in water_level_posts:
        if not post.name:
            continue
        match = STATION_LOCATION_RE.search(post.name)
        if match:
            locations.add(match.group(1).strip())

    for pump in pump_data:
        if pump.location:
            locations.add(pump.location)

    return len(locations)


# ---- 2. Active alerts ----
def _is_alert_status(status: Optional[str]) -> bool:
    if not status:
        return False
    status = status.lower()
    return any(k in status for k in ALERT_STATUS_KEYWORDS)


def calculate_active_alerts(
    water_level_posts: Iterable[WaterLevelPost],
    alerts: Iterable[FloodAlert],
) -> int:
    station_alerts = sum(1 for p in water_level_posts if _is_alert_status(p.status))
    active_flood_alerts = sum(1 for a in alerts if a.isActive)
    # the larger of the two sources wins
    return max(station_alerts, active_flood_alerts)


# ---- 3. Flood zones ----
def _zone_key(lat: Optional[float], lon: Optional[float]):
    """Grid cell for a coordinate pair, or None when either value is missing or non-finite."""
    if not (lat and lon) or not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return (math.floor(lat / ZONE_CELL_DEG), math.floor(lon / ZONE_CELL_DEG))


def calculate_flood_zones(
    water_level_posts: Iterable[WaterLevelPost],
    pump_data: Iterable[PumpData],
) -> int:
    zones = set()
    skipped = 0

    coords = [(p.lat, p.lon) for p in water_level_posts]
    coords += [(p.latitude, p.longitude) for p in pump_data]

    for lat, lon in coords:
        key = _zone_key(lat, lon)
        if key is None:
            skipped += 1
        else:
            zones.add(key)

    if skipped:
        logger.debug(f"[metrics] flood zones: skipped {skipped} records without usable coordinates")
    return len(zones)


# ---- 4. People at risk ----
def _station_multiplier(status: Optional[str]) -> int:
    if not status:
        return 0
    status = status.lower()
    if "danger" in status or "critical" in status:
        return 3
    if re.search(r"alert\s*2", status) or "warning" in status:
        return 2
    if re.search(r"alert\s*[13]", status):
        return 1
    return 0


def calculate_people_at_risk(
    water_level_posts: Iterable[WaterLevelPost],
    alerts: Iterable[FloodAlert],
) -> int:
    total = 0.0

    for post in water_level_posts:
        total += BASE_POPULATION_PER_STATION * _station_multiplier(post.status)

    for alert in alerts:
        if not alert.isActive or not alert.affectedAreas:
            continue
        area_population = len(alert.affectedAreas) * POPULATION_PER_AFFECTED_AREA
        total += area_population * ALERT_LEVEL_MULTIPLIER.get(alert.level, 0.0)

    return _round_half_up(total)


# ---- 5. Reporting stations ----
def calculate_weather_stations(
    water_level_posts: Iterable[WaterLevelPost],
    pump_data: Iterable[PumpData],
    now: Optional[datetime] = None,
) -> int:
    """Stations and pumps whose last reading is newer than one week."""
    now = now or utcnow()
    cutoff = now - RECENT_WINDOW

    def recent(value) -> bool:
        ts = parse_timestamp(value)
        return ts is not None and ts > cutoff

    active_water = sum(1 for p in water_level_posts if recent(p.timestamp))
    active_pumps = sum(1 for p in pump_data if recent(p.updated_at))
    return active_water + active_pumps


# ---- Composite ----
def calculate_dashboard_metrics(
    water_level_posts: List[WaterLevelPost],
    pump_data: List[PumpData],
    alerts: List[FloodAlert],
    now: Optional[datetime] = None,
) -> DashboardMetrics:
    now = now or utcnow()
    return DashboardMetrics(
        totalRegions=calculate_total_regions(water_level_posts, pump_data),
        activeAlerts=calculate_active_alerts(water_level_posts, alerts),
        floodZones=calculate_flood_zones(water_level_posts, pump_data),
        peopleAtRisk=calculate_people_at_risk(water_level_posts, alerts),
        weatherStations=calculate_weather_stations(water_level_posts, pump_data, now),
        lastUpdate=to_iso(now),
    )


def calculate_percentage_changes(current: DashboardMetrics, previous: DashboardMetrics) -> PercentChanges:
    def change(cur: float, prev: float) -> int:
        if prev == 0:
            return 0
        return _round_half_up((cur - prev) / prev * 100)

    return PercentChanges(**{
        field: change(getattr(current, field), getattr(previous, field))
        for field in METRIC_FIELDS
    })


def baseline_snapshot(current: DashboardMetrics, now: Optional[datetime] = None) -> DashboardMetrics:
    """Synthetic "last week" snapshot; a placeholder, not real history."""
    now = now or utcnow()
    values = {
        field: _round_half_up(getattr(current, field) * factor)
        for field, factor in BASELINE_FACTORS.items()
    }
    return DashboardMetrics(**values, lastUpdate=to_iso(now - RECENT_WINDOW))


def calculate_metrics_with_history(
    water_level_posts: List[WaterLevelPost],
    pump_data: List[PumpData],
    alerts: List[FloodAlert],
    previous: Optional[DashboardMetrics] = None,
    now: Optional[datetime] = None,
) -> MetricsWithHistory:
    now = now or utcnow()
    current = calculate_dashboard_metrics(water_level_posts, pump_data, alerts, now)
    if previous is None:
        previous = baseline_snapshot(current, now)

    return MetricsWithHistory(
        current=current,
        previous=previous,
        percentChanges=calculate_percentage_changes(current, previous),
    )
