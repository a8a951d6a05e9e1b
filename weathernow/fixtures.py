"""
Datos de ejemplo con la misma forma que las respuestas de OpenWeather
(/weather y /forecast). Se generan respecto a un `now` inyectado.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from .errors import NotFound

WEATHER_MAP = {
    "Clear": {"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"},
    "Clouds": {"id": 802, "main": "Clouds", "description": "scattered clouds", "icon": "03d"},
    "Rain": {"id": 501, "main": "Rain", "description": "moderate rain", "icon": "10d"},
    "Snow": {"id": 601, "main": "Snow", "description": "snow", "icon": "13d"},
    "Drizzle": {"id": 301, "main": "Drizzle", "description": "drizzle", "icon": "09d"},
    "Thunderstorm": {"id": 211, "main": "Thunderstorm", "description": "thunderstorm", "icon": "11d"},
}

# ciudad -> (temperatura base, condición, país)
CITY_PROFILES = {
    "London": (18, "Clouds", "GB"),
    "Mumbai": (32, "Rain", "IN"),
    "Delhi": (35, "Clear", "IN"),
    "Bengaluru": (28, "Clouds", "IN"),
    "Kolkata": (31, "Rain", "IN"),
    "Chennai": (34, "Clear", "IN"),
    "Hyderabad": (30, "Clouds", "IN"),
    "New York": (22, "Clear", "US"),
    "Paris": (20, "Clouds", "FR"),
    "Tokyo": (25, "Rain", "JP"),
    "Sydney": (19, "Clear", "AU"),
    "Dubai": (40, "Clear", "AE"),
    "Singapore": (31, "Thunderstorm", "SG"),
    "Los Angeles": (24, "Clear", "US"),
    "Chicago": (21, "Clouds", "US"),
    "Toronto": (19, "Rain", "CA"),
    "Moscow": (17, "Clouds", "RU"),
    "Beijing": (26, "Clear", "CN"),
    "Shanghai": (28, "Rain", "CN"),
    "Cairo": (36, "Clear", "EG"),
    "Rio de Janeiro": (27, "Clouds", "BR"),
    "Buenos Aires": (19, "Clouds", "AR"),
    "Mexico City": (23, "Rain", "MX"),
    "Lagos": (29, "Thunderstorm", "NG"),
}

FALLBACK_CITY = "London"
ERROR_CITY = "error"


def major_cities() -> list[str]:
    return sorted(CITY_PROFILES)


def generate_mock_data(city: str, temp: float, weather_main: str, country: str, now: datetime) -> dict:
    now = now.astimezone(timezone.utc) if now.tzinfo else now
    current = {
        "coord": {"lon": 0, "lat": 0},
        "weather": [dict(WEATHER_MAP[weather_main])],
        "base": "stations",
        "main": {
            "temp": temp, "feels_like": temp - 2,
            "temp_min": temp - 5, "temp_max": temp + 5,
            "pressure": 1012, "humidity": 68,
        },
        "visibility": 10000,
        "wind": {"speed": 4.63, "deg": 240},
        "clouds": {"all": 40},
        "dt": int(now.timestamp()),
        "sys": {"type": 2, "id": 2075535, "country": country, "sunrise": 0, "sunset": 0},
        "timezone": 0,
        "id": 1,
        "name": city,
        "cod": 200,
    }

    items = []
    for i in range(5):
        day = now + timedelta(days=i + 1)
        t = temp + (i * 2) - 3
        items.append({
            "dt": int(day.timestamp()),
            "main": {
                "temp": t, "temp_min": t - 3, "temp_max": t + 3,
                "pressure": 1015, "sea_level": 1015, "grnd_level": 1014,
                "humidity": 60, "temp_kf": -0.45,
            },
            "weather": [dict(WEATHER_MAP["Clouds" if i % 2 == 0 else "Clear"])],
            "clouds": {"all": 75 if i % 2 == 0 else 20},
            "wind": {"speed": 3.0, "deg": 210, "gust": 4.0},
            "visibility": 10000,
            "pop": 0.1,
            "sys": {"pod": "d"},
            "dt_txt": day.strftime("%Y-%m-%d") + " 12:00:00",
        })

    forecast = {
        "cod": "200",
        "message": 0,
        "cnt": 40,
        "list": items,
        "city": {
            "id": 1, "name": city, "coord": {"lat": 0, "lon": 0}, "country": country,
            "population": 1000000, "timezone": 0, "sunrise": 0, "sunset": 0,
        },
    }
    return {"current": current, "forecast": forecast}


def get_mock_weather(city: str, now: Optional[datetime] = None) -> dict:
    if city.lower() == ERROR_CITY:
        raise NotFound("This is a sample error message.")
    now = now or datetime.now(timezone.utc)
    if city in CITY_PROFILES:
        temp, main, country = CITY_PROFILES[city]
    else:
        # ciudad desconocida: datos de Londres con el nombre pedido
        temp, main, country = CITY_PROFILES[FALLBACK_CITY]
    return generate_mock_data(city, temp, main, country, now)
