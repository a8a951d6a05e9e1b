import os
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .aggregations import aggregate_forecast, samples_from_forecast, today_utc
from .clients import fetch_current, fetch_forecast
from .errors import MalformedInput, WeatherSourceError
from .fixtures import get_mock_weather, major_cities
from .presentation import background_theme, current_view, icon_name

# ------------------------------------------------------------
# Configuración principal
# ------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
WEATHER_SOURCE = os.getenv("WEATHER_SOURCE", "mock").lower()  # mock | openweather

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

app = FastAPI(title="WeatherNow API", version="1.0.0")

# --- CORS (listas separadas por comas en el entorno) ---
def _env_list(name: str, default: str) -> list[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]


ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "false").lower() == "true"
CORS_MAX_AGE = int(os.getenv("CORS_MAX_AGE", "600"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=_env_list("ALLOW_ORIGINS", "*"),
    allow_credentials=ALLOW_CREDENTIALS,
    allow_methods=_env_list("ALLOW_METHODS", "GET,OPTIONS"),
    allow_headers=_env_list("ALLOW_HEADERS", "*"),
    expose_headers=_env_list("EXPOSE_HEADERS", ""),
    max_age=CORS_MAX_AGE,
)


@app.exception_handler(WeatherSourceError)
async def weather_source_error(request: Request, exc: WeatherSourceError):
    # el mensaje de la fuente se muestra tal cual
    logger.info("Weather source error %s on %s: %s", exc.status_code, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(MalformedInput)
async def malformed_input(request: Request, exc: MalformedInput):
    logger.error("Malformed forecast data on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": f"Malformed forecast data: {exc}"})


async def load_weather(city: str, now: datetime):
    """Devuelve (payload actual, muestras de previsión) de la fuente configurada."""
    if WEATHER_SOURCE == "openweather":
        current = await fetch_current(city)
        samples = await fetch_forecast(city)
        return current, samples
    data = get_mock_weather(city, now)
    return data["current"], samples_from_forecast(data["forecast"])


@app.get("/health")
async def health():
    return {"status": "ok", "source": WEATHER_SOURCE}


@app.get("/cities")
async def cities():
    return {"cities": major_cities()}


@app.get("/weather/{city}")
async def get_weather(city: str):
    # 1) Validar ciudad
    city = city.strip()
    if not city:
        raise HTTPException(400, "City must not be empty")

    # 2) "Hoy" se calcula una vez y se inyecta en la agregación
    now = datetime.now(timezone.utc)
    today = today_utc(now)

    # 3) Fuente de datos (los errores suben sin tocar a los handlers)
    current, samples = await load_weather(city, now)

    # 4) Agregación diaria
    days = aggregate_forecast(samples, today)

    view = current_view(current)
    return {
        "city": view["name"] or city,
        "country": view["country"],
        "source": WEATHER_SOURCE,
        "today": today.isoformat(),
        "theme": background_theme(view["main"]),
        "current": view,
        "forecast": [
            {
                "day": d.weekday_label,
                "icon": d.icon_code,
                "icon_name": icon_name(d.icon_code),
                "temp_max": d.temp_max,
                "temp_min": d.temp_min,
            }
            for d in days
        ],
    }
