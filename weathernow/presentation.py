from typing import Optional

from .aggregations import round_half_away

ICON_NAMES = {
    "01d": "sun", "01n": "moon",
    "02d": "cloud-sun", "02n": "cloud-moon",
    "03d": "cloud", "03n": "cloud",
    "04d": "cloudy", "04n": "cloudy",
    "09d": "cloud-rain", "09n": "cloud-rain",
    "10d": "cloud-drizzle", "10n": "cloud-drizzle",
    "11d": "cloud-lightning", "11n": "cloud-lightning",
    "13d": "snowflake", "13n": "snowflake",
    "50d": "haze", "50n": "haze",
}
DEFAULT_ICON_NAME = "cloudy"

BACKGROUNDS = {
    "Clear": "from-sky-400 to-yellow-300 text-slate-800",
    "Clouds": "from-slate-400 to-gray-500 text-white",
    "Rain": "from-blue-700 to-gray-600 text-white",
    "Drizzle": "from-sky-600 to-gray-500 text-white",
    "Thunderstorm": "from-gray-800 to-purple-900 text-white",
    "Snow": "from-slate-300 to-cyan-200 text-slate-800",
}
DEFAULT_BACKGROUND = "from-gray-700 to-gray-800 text-white"


def icon_name(code: Optional[str]) -> str:
    return ICON_NAMES.get(code or "", DEFAULT_ICON_NAME)


def background_theme(weather_main: Optional[str]) -> str:
    return BACKGROUNDS.get(weather_main or "", DEFAULT_BACKGROUND)


def current_view(payload: dict) -> dict:
    """Condiciones actuales listas para pintar (payload con forma de /weather)."""
    weather = (payload.get("weather") or [{}])[0]
    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    return {
        "name": payload.get("name"),
        "country": (payload.get("sys") or {}).get("country"),
        "main": weather.get("main"),
        "description": weather.get("description"),
        "icon": weather.get("icon"),
        "icon_name": icon_name(weather.get("icon")),
        "temp": round_half_away(main["temp"]) if main.get("temp") is not None else None,
        "feels_like": round_half_away(main["feels_like"]) if main.get("feels_like") is not None else None,
        "humidity": main.get("humidity"),
        "pressure": main.get("pressure"),
        "wind_speed": round(wind["speed"], 1) if wind.get("speed") is not None else None,
    }
