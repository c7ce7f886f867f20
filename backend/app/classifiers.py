# backend/app/classifiers.py
"""
Rule-based classifiers for gauge readings, pump conditions, safe zones
and crowdsourced depth reports. All functions are pure and never raise.
"""

from typing import Optional

from .schemas import WaterLevelStatus, PumpStatus, SafeZoneVerdict, ReportLevel

# ---- Constants ----
FEET_TO_METERS = 0.3048

# (threshold_m, status, severity, color), highest first
WATER_LEVEL_LADDER = [
    (2.5, "Danger", "danger", "#EF4444"),
    (2.0, "Alert 2", "alert2", "#F59E0B"),
    (1.5, "Alert 3", "alert3", "#F59E0B"),
    (1.0, "Alert 1", "alert1", "#3B82F6"),
]
NORMAL_STATUS = ("Normal", "normal", "#10B981")

SAFE_HIGH_CONFIDENCE = 95
SAFE_MEDIUM_CONFIDENCE = 70
UNSAFE_CONFIDENCE = 90
UNCERTAIN_CONFIDENCE = 40

REPORT_DEPTHS = {
    "ankle-length": ("Low", "low"),
    "knee-length": ("Knee", "medium"),
    "mid-thigh": ("Thigh", "medium"),
    "belly-waist": ("Waist", "high"),
    "chest-length": ("Chest", "high"),
}


def to_meters(level: float, unit: str = "m") -> float:
    return level * FEET_TO_METERS if unit == "ft" else level


# --- 1. Water level ---
def classify_water_level(level: float, unit: str = "m") -> WaterLevelStatus:
    """
    Map a gauge reading to a severity bucket.
    Readings in feet are converted to metres first. Negative or otherwise
    implausible values are not rejected, they simply land in "normal".
    """
    level_m = to_meters(level, unit)
    for threshold, status, severity, color in WATER_LEVEL_LADDER:
        if level_m >= threshold:
            return WaterLevelStatus(status=status, severity=severity, color=color)
    status, severity, color = NORMAL_STATUS
    return WaterLevelStatus(status=status, severity=severity, color=color)


# --- 2. Pump condition ---
def classify_pump_status(condition: Optional[str]) -> PumpStatus:
    """
    Substring match on the free-text condition, case-insensitive.
    Anything unrecognised (including an empty string) is reported offline.
    """
    normalized = (condition or "").lower()

    if "active" in normalized or "operating" in normalized:
        return PumpStatus(status="active", label="Active", color="#10B981")
    if "maintenance" in normalized:
        return PumpStatus(status="maintenance", label="Maintenance", color="#F59E0B")
    return PumpStatus(status="offline", label="Offline", color="#EF4444")


# --- 3. Safe zone ---
def classify_safe_zone(
    water_level: Optional[float] = None,
    alert_level: Optional[str] = None,
    elevation: Optional[float] = None,
) -> SafeZoneVerdict:
    """
    Hand-tuned decision list, first match wins. A missing value (None)
    fails every numeric comparison.
    """
    has_level = water_level is not None
    no_alert = not alert_level or alert_level == "Normal"
    danger_alert = bool(alert_level) and "Danger" in alert_level

    if has_level and water_level < 1.0 and no_alert and elevation is not None and elevation > 50:
        return SafeZoneVerdict(
            isSafe=True,
            confidence=SAFE_HIGH_CONFIDENCE,
            reason="Low water level, no active alerts, elevated terrain",
        )

    if has_level and water_level < 1.5 and not danger_alert:
        return SafeZoneVerdict(
            isSafe=True,
            confidence=SAFE_MEDIUM_CONFIDENCE,
            reason="Moderate water level, no immediate danger",
        )

    if (has_level and water_level >= 2.0) or danger_alert:
        return SafeZoneVerdict(
            isSafe=False,
            confidence=UNSAFE_CONFIDENCE,
            reason="High water level or active danger alerts",
        )

    return SafeZoneVerdict(
        isSafe=False,
        confidence=UNCERTAIN_CONFIDENCE,
        reason="Insufficient data for assessment",
    )


# --- 4. Crowdsourced depth vocabulary ---
def classify_report_water_level(water_level: Optional[str]) -> ReportLevel:
    label, level = REPORT_DEPTHS.get(water_level or "", ("Unknown", "low"))
    return ReportLevel(label=label, level=level)
