from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from .chart_aggregator import aggregate_incidents
from .classifiers import classify_water_level, classify_pump_status, classify_safe_zone
from .db_helpers import insert_snapshot, get_latest_snapshot
from .flood_reports import filter_reports, report_stats, reports_to_csv
from .incident_stats import filter_incidents, sort_incidents, summarize_incidents
from .logging_setup import logger
from .metrics_calculator import calculate_dashboard_metrics, calculate_metrics_with_history
from .schemas import (
    WaterLevelStatus, PumpStatus, SafeZoneVerdict,
    DashboardFeed, HistoryFeed, DashboardMetrics, MetricsWithHistory,
    HistoricalIncident, ChartDataPoint, IncidentSummary,
    FloodReport, ReportFilterRequest, ReportFilterResponse, WeatherSnapshot,
)
from .settings import INCIDENTS_PATH
from .storm_events import load_incidents
from .weather import normalize_current_weather

router = APIRouter()


def get_incidents() -> List[HistoricalIncident]:
    try:
        return load_incidents(INCIDENTS_PATH)
    except Exception as e:
        logger.error(f"[api] Loading incidents failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch historical incidents")


# ----- Classification -----

@router.get("/classify/water-level", response_model=WaterLevelStatus)
def water_level_status(level: float, unit: str = Query("m", pattern="^(m|ft)$")):
    return classify_water_level(level, unit)

@router.get("/classify/pump", response_model=PumpStatus)
def pump_status(condition: str = ""):
    return classify_pump_status(condition)

@router.get("/classify/safe-zone", response_model=SafeZoneVerdict)
def safe_zone(
    water_level: Optional[float] = None,
    alert_level: Optional[str] = None,
    elevation: Optional[float] = None,
):
    return classify_safe_zone(water_level, alert_level, elevation)


# ----- Dashboard metrics -----

@router.post("/metrics/dashboard", response_model=DashboardMetrics)
def dashboard_metrics(feed: DashboardFeed):
    return calculate_dashboard_metrics(feed.waterLevelPosts, feed.pumpData, feed.alerts)

@router.post("/metrics/history", response_model=MetricsWithHistory)
def dashboard_metrics_with_history(feed: HistoryFeed, persist: bool = False):
    """
    Current metrics plus percentage change against a previous snapshot:
    the one supplied in the body, else the latest stored one, else a
    synthetic baseline.
    """
    previous = feed.previous or get_latest_snapshot()
    result = calculate_metrics_with_history(feed.waterLevelPosts, feed.pumpData, feed.alerts, previous)
    if persist:
        insert_snapshot(result.current)
    return result


# ----- Incident statistics -----

@router.get("/statistics/incidents", response_model=List[HistoricalIncident])
def list_incidents(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    type: str = "all",
    search: str = "",
    sort_by: str = Query("date", pattern="^(date|severity|type)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    incidents: List[HistoricalIncident] = Depends(get_incidents),
):
    filtered = filter_incidents(incidents, start=start, end=end, incident_type=type, search=search)
    return sort_incidents(filtered, sort_by=sort_by, order=order)

@router.get("/statistics/chart", response_model=List[ChartDataPoint])
def incident_chart(
    granularity: str = Query("month", pattern="^(day|month)$"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    incidents: List[HistoricalIncident] = Depends(get_incidents),
):
    return aggregate_incidents(filter_incidents(incidents, start=start, end=end), granularity)

@router.get("/statistics/summary", response_model=IncidentSummary)
def incident_summary(incidents: List[HistoricalIncident] = Depends(get_incidents)):
    return summarize_incidents(incidents)


# ----- Crowdsourced reports -----

@router.post("/reports/filter", response_model=ReportFilterResponse)
def reports_filter(req: ReportFilterRequest):
    matched = filter_reports(req.reports, search=req.search, level=req.level)
    shown = matched[:req.limit] if req.limit is not None else matched
    return {"reports": shown, "total": len(matched), "stats": report_stats(req.reports)}

@router.post("/reports/export", response_class=PlainTextResponse)
def reports_export(reports: List[FloodReport]):
    if not reports:
        raise HTTPException(status_code=400, detail="No data available to export.")
    return PlainTextResponse(
        reports_to_csv(reports),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=flood_report.csv"},
    )


# ----- Weather -----

@router.post("/weather/normalize", response_model=WeatherSnapshot)
def weather_normalize(payload: Dict[str, Any]):
    return normalize_current_weather(payload)
