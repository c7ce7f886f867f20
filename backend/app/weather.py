# backend/app/weather.py
"""
Normalize current-weather payloads from the two upstream providers into a
single WeatherSnapshot:

    OpenWeather   {"name", "main": {"temp", "humidity", "pressure"},
                   "weather": [{"description"}], "wind": {"speed"}}
    Open-Meteo    {"temperature" | "temp", "relativehumidity_2m" | "humidity",
                   "windspeed", "pressure", "description"}
"""

from typing import Any, Dict, Optional

from .schemas import WeatherSnapshot


def _num(x) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    try:
        return float(x)
    except (TypeError, ValueError):
        return None


def _first(d: Dict[str, Any], *keys):
    for k in keys:
        if d.get(k) is not None:
            return d[k]
    return None


def detect_shape(payload: Dict[str, Any]) -> str:
    if isinstance(payload.get("main"), dict):
        return "openweather"
    if any(k in payload for k in ("temperature", "temp", "relativehumidity_2m", "windspeed")):
        return "openmeteo"
    return "unknown"


def _from_openweather(payload: Dict[str, Any]) -> WeatherSnapshot:
    main = payload.get("main") or {}
    weather = payload.get("weather")
    first = weather[0] if isinstance(weather, list) and weather else {}
    wind = payload.get("wind") if isinstance(payload.get("wind"), dict) else {}
    description = first.get("description", "") if isinstance(first, dict) else ""
    return WeatherSnapshot(
        source="openweather",
        name=str(payload.get("name") or ""),
        temperature=_num(main.get("temp")),
        description=description or "",
        humidity=_num(main.get("humidity")),
        wind_speed=_num(wind.get("speed")),
        pressure=_num(main.get("pressure")),
    )


def _from_openmeteo(payload: Dict[str, Any]) -> WeatherSnapshot:
    return WeatherSnapshot(
        source="openmeteo",
        name=str(payload.get("name") or ""),
        temperature=_num(_first(payload, "temperature", "temp")),
        description=str(payload.get("description") or ""),
        humidity=_num(_first(payload, "relativehumidity_2m", "humidity")),
        wind_speed=_num(_first(payload, "windspeed", "wind_speed")),
        pressure=_num(payload.get("pressure")),
    )


def normalize_current_weather(payload: Optional[Dict[str, Any]]) -> WeatherSnapshot:
    payload = payload or {}
    shape = detect_shape(payload)
    if shape == "openweather":
        return _from_openweather(payload)
    if shape == "openmeteo":
        return _from_openmeteo(payload)
    return WeatherSnapshot(source="unknown", name=str(payload.get("name") or ""))
