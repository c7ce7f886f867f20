"""
test_weather.py — normalization of the two upstream current-weather shapes.
"""

from backend.app.weather import detect_shape, normalize_current_weather


def test_openweather_shape():
    snap = normalize_current_weather({
        "name": "Trenton",
        "main": {"temp": 21.4, "humidity": 63, "pressure": 1012},
        "weather": [{"description": "light rain"}],
        "wind": {"speed": 4.1},
    })
    assert snap.source == "openweather"
    assert snap.name == "Trenton"
    assert snap.temperature == 21.4
    assert snap.description == "light rain"
    assert snap.humidity == 63
    assert snap.wind_speed == 4.1
    assert snap.pressure == 1012


def test_openmeteo_shape():
    snap = normalize_current_weather({"temperature": 18.0, "relativehumidity_2m": 80, "windspeed": 12.5})
    assert snap.source == "openmeteo"
    assert snap.temperature == 18.0
    assert snap.humidity == 80
    assert snap.wind_speed == 12.5
    assert snap.pressure is None


def test_temp_alias():
    assert normalize_current_weather({"temp": 5}).temperature == 5.0


def test_unknown_shape():
    snap = normalize_current_weather({"foo": 1})
    assert snap.source == "unknown"
    assert snap.temperature is None
    assert detect_shape({}) == "unknown"
    assert normalize_current_weather(None).source == "unknown"


def test_openweather_weather_as_object():
    snap = normalize_current_weather({"main": {"temp": 1}, "weather": {"description": "rain"}})
    assert snap.source == "openweather"
    assert snap.temperature == 1.0
    assert snap.description == ""


def test_openweather_scalar_wind_and_empty_weather():
    snap = normalize_current_weather({"main": {"humidity": 70}, "weather": [], "wind": 5})
    assert snap.source == "openweather"
    assert snap.wind_speed is None
    assert snap.description == ""
    assert snap.humidity == 70


def test_openweather_non_dict_weather_entry():
    snap = normalize_current_weather({"main": {}, "weather": ["rain"]})
    assert snap.description == ""
