# backend/app/chart_aggregator.py
"""
Bucket historical incidents by day or month for charting.
"""

from datetime import datetime
from typing import Dict, Any, List, Iterable

from .logging_setup import logger
from .schemas import HistoricalIncident, ChartDataPoint
from .time_utils import parse_timestamp

GRANULARITIES = ("day", "month")


def _bucket(dt: datetime, granularity: str):
    """Return (key, display label, sort date) for the bucket containing dt."""
    if granularity == "day":
        return dt.strftime("%Y-%m-%d"), dt.strftime("%d %b %Y"), datetime(dt.year, dt.month, dt.day)
    return dt.strftime("%Y-%m"), dt.strftime("%b %y"), datetime(dt.year, dt.month, 1)


def aggregate_incidents(incidents: Iterable[HistoricalIncident], granularity: str = "day") -> List[ChartDataPoint]:
    """
    Group incidents into day (YYYY-MM-DD) or month (YYYY-MM) buckets and
    return one point per observed bucket, oldest first.
    Gaps are not zero-filled; incidents with an unparseable date are skipped.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"granularity must be one of {GRANULARITIES}, got {granularity!r}")

    buckets: Dict[str, Dict[str, Any]] = {}
    skipped = 0

    for incident in incidents:
        dt = parse_timestamp(incident.date)
        if dt is None:
            skipped += 1
            continue

        key, label, sort_date = _bucket(dt, granularity)
        b = buckets.get(key)
        if b is None:
            b = buckets[key] = {
                "label": label,
                "sort_date": sort_date,
                "incidents": 0,
                "severity_sum": 0.0,
                "resolved": 0,
                "ongoing": 0,
                "losses": 0.0,
            }

        b["incidents"] += 1
        b["severity_sum"] += incident.severity or 0
        if incident.status == "resolved":
            b["resolved"] += 1
        elif incident.status == "ongoing":
            b["ongoing"] += 1
        b["losses"] += incident.reported_losses or 0

    if skipped:
        logger.debug(f"[chart_aggregator] skipped {skipped} incidents with invalid dates")

    ordered = sorted(buckets.items(), key=lambda kv: kv[1]["sort_date"])
    return [
        ChartDataPoint(
            name=key,
            label=b["label"],
            incidents=b["incidents"],
            severity=b["severity_sum"] / b["incidents"],
            resolved=b["resolved"],
            ongoing=b["ongoing"],
            losses=b["losses"],
        )
        for key, b in ordered
    ]
