# backend/app/incident_stats.py
"""
Filtering, ordering and headline numbers for the incident statistics page.
"""

from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd

from .schemas import HistoricalIncident, IncidentSummary
from .time_utils import parse_timestamp

SORT_KEYS = ("date", "severity", "type")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def filter_incidents(
    incidents: List[HistoricalIncident],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    incident_type: str = "all",
    search: str = "",
) -> List[HistoricalIncident]:
    """
    Keep incidents inside the inclusive [start, end] window whose type
    matches (case-insensitive, "all" matches everything) and whose
    location, description or type contains the search term.
    Incidents with an unparseable date are dropped only when a window is set.
    """
    term = (search or "").lower()
    wanted_type = (incident_type or "all").lower()
    out = []

    for inc in incidents:
        if start is not None or end is not None:
            dt = parse_timestamp(inc.date)
            if dt is None:
                continue
            if start is not None and dt < _aware(start):
                continue
            if end is not None and dt > _aware(end):
                continue

        if wanted_type != "all" and inc.type.lower() != wanted_type:
            continue

        if term and not (
            term in inc.location.lower()
            or term in inc.description.lower()
            or term in inc.type.lower()
        ):
            continue

        out.append(inc)
    return out


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def sort_incidents(
    incidents: List[HistoricalIncident],
    sort_by: str = "date",
    order: str = "desc",
) -> List[HistoricalIncident]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
    reverse = order == "desc"

    if sort_by == "date":
        key = lambda inc: parse_timestamp(inc.date) or _EPOCH
    elif sort_by == "severity":
        key = lambda inc: inc.severity or 0
    else:
        key = lambda inc: inc.type.lower()

    return sorted(incidents, key=key, reverse=reverse)


def summarize_incidents(incidents: List[HistoricalIncident]) -> IncidentSummary:
    if not incidents:
        return IncidentSummary(
            totalIncidents=0, totalEvacuees=0, totalLosses=0.0,
            averageSeverity=0.0, byType={}, byStatus={},
        )

    df = pd.DataFrame([inc.model_dump() for inc in incidents])
    evacuees = df["evacuees"].fillna(0)
    losses = df["reported_losses"].fillna(0)
    severity = df["severity"].fillna(0)

    return IncidentSummary(
        totalIncidents=len(df),
        totalEvacuees=int(evacuees.sum()),
        totalLosses=float(losses.sum()),
        averageSeverity=round(float(severity.mean()), 1),
        byType={str(k): int(v) for k, v in df["type"].value_counts().items()},
        byStatus={str(k): int(v) for k, v in df["status"].value_counts().items()},
    )
