# backend/app/storm_events.py
"""
Historical incident sources.

NOAA Storm Events exports (CSV) are converted row by row into
HistoricalIncident records; a JSON file holding a list of incidents is
accepted as-is.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from .logging_setup import logger
from .schemas import HistoricalIncident
from .settings import INCIDENT_LIMIT
from .time_utils import parse_timestamp, to_iso

DAMAGE_NUMBER_RE = re.compile(r"[0-9]*\.?[0-9]+")

# first match wins
SEVERITY_BY_KEYWORD = [
    (("tornado", "hurricane"), 9),
    (("flood", "earthquake"), 8),
    (("thunderstorm", "wind", "hail"), 6),
]
DEFAULT_SEVERITY = 5


def _is_blank(x) -> bool:
    return x is None or (isinstance(x, float) and pd.isna(x)) or str(x).strip() == ""


def parse_damage(value: Any) -> float:
    """
    Storm Events damage strings: "1.00K" -> 1000, "5.00M" -> 5000000.
    Blank or unparseable values count as 0.
    """
    if _is_blank(value):
        return 0.0
    text = str(value).upper()
    match = DAMAGE_NUMBER_RE.search(re.sub(r"[^0-9.KM]", "", text))
    if not match:
        return 0.0
    number = float(match.group(0))
    if "M" in text:
        return number * 1_000_000
    if "K" in text:
        return number * 1_000
    return number


def severity_for_event_type(event_type: Optional[str]) -> int:
    et = (event_type or "").lower()
    for keywords, severity in SEVERITY_BY_KEYWORD:
        if any(k in et for k in keywords):
            return severity
    return DEFAULT_SEVERITY


def _int_or_zero(x) -> int:
    if _is_blank(x):
        return 0
    try:
        return int(float(x))
    except (TypeError, ValueError):
        return 0


def _text(x) -> str:
    return "" if _is_blank(x) else str(x).strip()


def storm_event_to_incident(row: Dict[str, Any]) -> HistoricalIncident:
    event_type = _text(row.get("EVENT_TYPE"))
    state = _text(row.get("STATE"))
    county = _text(row.get("CZ_NAME"))

    total_damage = parse_damage(row.get("DAMAGE_PROPERTY")) + parse_damage(row.get("DAMAGE_CROPS"))
    begin = parse_timestamp(_text(row.get("BEGIN_DATE_TIME")))

    return HistoricalIncident(
        id=_text(row.get("id")) or _text(row.get("EVENT_ID")),
        type=event_type or "Other",
        location=f"{state}{', ' + county if county else ''}",
        date=to_iso(begin) if begin else _text(row.get("BEGIN_DATE_TIME")),
        description=_text(row.get("EPISODE_NARRATIVE")) or f"{event_type} event in {county or state}",
        severity=severity_for_event_type(event_type),
        casualties=_int_or_zero(row.get("DEATHS_DIRECT")) + _int_or_zero(row.get("DEATHS_INDIRECT")),
        evacuees=0,
        reported_losses=total_damage if total_damage > 0 else None,
        damage_level=f"${total_damage / 1_000_000:.2f}M" if total_damage > 0 else "Unknown",
        impact_areas=[county] if county else [],
        status="resolved",
    )


def storm_events_to_incidents(df: pd.DataFrame, limit: int = INCIDENT_LIMIT) -> List[HistoricalIncident]:
    """Newest first, capped at `limit` rows. Rows that fail validation are skipped."""
    if df.empty:
        return []
    if "BEGIN_DATE_TIME" in df.columns:
        order = pd.to_datetime(df["BEGIN_DATE_TIME"], errors="coerce", utc=True, format="mixed")
        df = df.assign(_begin=order).sort_values("_begin", ascending=False, na_position="last")
    df = df.head(limit)

    incidents = []
    for rec in df.to_dict(orient="records"):
        try:
            incidents.append(storm_event_to_incident(rec))
        except ValidationError as e:
            logger.warning(f"[storm_events] skipping row {rec.get('EVENT_ID')}: {e}")
    return incidents


def load_incidents(path: Path) -> List[HistoricalIncident]:
    """
    Load incidents from a Storm Events CSV or a JSON list.
    A missing file yields an empty list.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"[storm_events] incidents source not found at {path}")
        return []

    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str)
        incidents = storm_events_to_incidents(df)
    else:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON list of incidents in {path}")
        incidents = []
        for item in raw:
            try:
                incidents.append(HistoricalIncident.model_validate(item))
            except ValidationError as e:
                logger.warning(f"[storm_events] skipping incident {item.get('id') if isinstance(item, dict) else item}: {e}")

    logger.info(f"[storm_events] loaded {len(incidents)} incidents from {os.path.basename(str(path))}")
    return incidents
