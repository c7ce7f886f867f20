# backend/app/flood_reports.py
"""
Crowdsourced flood reports: search/level filtering, level counts and CSV export.
"""

import csv
import io
from datetime import datetime, timezone
from typing import List

import pandas as pd

from .classifiers import classify_report_water_level
from .schemas import FloodReport, ReportStats
from .time_utils import parse_timestamp

EXPORT_COLUMNS = [
    "ID", "Location", "Latitude", "Longitude", "Water Level",
    "Description", "Reporter Name", "Reporter Contact", "Time",
]
EXPORT_TIME_FORMAT = "%d %b %Y, %H:%M"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def filter_reports(
    reports: List[FloodReport],
    search: str = "",
    level: str = "all",
) -> List[FloodReport]:
    """
    Reports whose location or description contains `search` and whose depth
    class equals `level` ("all" keeps every level), newest first.
    """
    term = (search or "").lower()
    matched = []
    for r in reports:
        if term and not (term in r.location.lower() or (r.description and term in r.description.lower())):
            continue
        if level != "all" and classify_report_water_level(r.water_level).level != level:
            continue
        matched.append(r)

    matched.sort(key=lambda r: parse_timestamp(r.created_at) or _EPOCH, reverse=True)
    return matched


def report_stats(reports: List[FloodReport]) -> ReportStats:
    levels = [classify_report_water_level(r.water_level).level for r in reports]
    return ReportStats(
        total=len(reports),
        highLevel=levels.count("high"),
        mediumLevel=levels.count("medium"),
        lowLevel=levels.count("low"),
    )


def _format_time(value: str) -> str:
    dt = parse_timestamp(value)
    return dt.strftime(EXPORT_TIME_FORMAT) if dt else ""


def reports_to_csv(reports: List[FloodReport]) -> str:
    rows = [
        {
            "ID": r.id,
            "Location": r.location,
            "Latitude": r.latitude,
            "Longitude": r.longitude,
            "Water Level": classify_report_water_level(r.water_level).label,
            "Description": r.description or "",
            "Reporter Name": r.reporter_name or "",
            "Reporter Contact": r.reporter_contact or "",
            "Time": _format_time(r.created_at),
        }
        for r in reports
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    buf = io.StringIO()
    df.to_csv(buf, index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    return buf.getvalue()
