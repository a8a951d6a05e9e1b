import os
import asyncio
import logging
import random
import httpx

from .aggregations import IntervalSample, samples_from_forecast
from .errors import NetworkFailure, NotFound, Unauthorized, WeatherSourceError

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "3"))
PER_REQ_TIMEOUT = float(os.getenv("PER_REQ_TIMEOUT", "5"))
BACKOFF_BASE = float(os.getenv("BACKOFF_BASE", "1"))


async def _get_json(path: str, city: str) -> dict:
    """
    Política:
    - 200 -> devolver JSON
    - 401/403 -> Unauthorized, 404 -> NotFound, otro 4xx -> WeatherSourceError (sin reintentos)
    - 5xx/errores red -> reintentos con backoff exponencial + jitter, si agota -> NetworkFailure
    """
    if not OPENWEATHER_API_KEY:
        raise Unauthorized("OPENWEATHER_API_KEY missing")

    last_err: Exception | None = None

    for attempt in range(MAX_RETRIES):
        try:
            async with httpx.AsyncClient(timeout=PER_REQ_TIMEOUT) as client:
                r = await client.get(
                    f"{OPENWEATHER_BASE_URL}{path}",
                    params={"q": city, "appid": OPENWEATHER_API_KEY, "units": "metric"},
                )
        except httpx.RequestError as e:
            # error de red/timeout -> candidato a reintento
            last_err = e
        else:
            if r.status_code == 200:
                return r.json()

            if r.status_code in (401, 403):
                raise Unauthorized(f"OpenWeather rejected the API key ({r.status_code})")
            if r.status_code == 404:
                raise NotFound(f"City not found: {city}")
            if 400 <= r.status_code < 500:
                raise WeatherSourceError(f"{r.status_code}: {r.text}", status_code=r.status_code)

            last_err = WeatherSourceError(f"{r.status_code}: {r.text}")

        logger.warning("OpenWeather %s failed (attempt %d/%d): %s", path, attempt + 1, MAX_RETRIES, last_err)
        if attempt < MAX_RETRIES - 1:
            base = BACKOFF_BASE * 2 ** attempt  # 1, 2, 4...
            jitter = base * random.uniform(0.0, 0.2)
            await asyncio.sleep(base + jitter)

    raise NetworkFailure(f"OpenWeather unavailable: {last_err}")


async def fetch_current(city: str) -> dict:
    return await _get_json("/weather", city)


async def fetch_forecast(city: str) -> list[IntervalSample]:
    payload = await _get_json("/forecast", city)
    return samples_from_forecast(payload)
