import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from .errors import MalformedInput

MAX_FORECAST_DAYS = 5
DEFAULT_ICON = "03d"  # nubes genéricas
MIDDAY = time(12, 0, 0)

DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")

# nombres cortos en-US; no dependemos del locale del proceso
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class IntervalSample:
    timestamp_label: str  # "YYYY-MM-DD HH:MM:SS"
    temp_max: float
    temp_min: float
    icon_code: str


@dataclass(frozen=True)
class DailySummary:
    weekday_label: str
    icon_code: str
    temp_max: int
    temp_min: int


def _parse_timestamp(label: str) -> datetime:
    # strptime acepta "2025-1-5 9:0:0"; exigimos la forma canónica
    if not isinstance(label, str) or not TIMESTAMP_RE.fullmatch(label):
        raise MalformedInput(f"Invalid timestamp {label!r} (expected YYYY-MM-DD HH:MM:SS)")
    try:
        return datetime.strptime(label, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        raise MalformedInput(f"Invalid timestamp {label!r} (expected YYYY-MM-DD HH:MM:SS)")


def _parse_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_RE.fullmatch(value):
        raise MalformedInput(f"Invalid date {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise MalformedInput(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def _check_temp(value: float, label: str) -> float:
    # json.loads acepta NaN/Infinity
    try:
        finite = math.isfinite(value)
    except TypeError:
        raise MalformedInput(f"Invalid temperature {value!r} at {label!r}")
    if not finite:
        raise MalformedInput(f"Non-finite temperature {value!r} at {label!r}")
    return value


def round_half_away(x: float) -> int:
    # 2.5 -> 3, -2.5 -> -3 (round() de Python redondea al par)
    q = Decimal(str(x)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(q)


def weekday_label(day: date) -> str:
    # anclamos a mediodía UTC para que el día no "salte" por zona horaria
    anchored = datetime.combine(day, MIDDAY, tzinfo=timezone.utc)
    return WEEKDAYS[anchored.weekday()]


def today_utc(now: Optional[datetime] = None) -> date:
    """Fecha UTC de `now` (por defecto, el instante actual)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def aggregate_forecast(samples: Iterable[IntervalSample], today: date | str) -> list[DailySummary]:
    """
    Resume una serie de muestras cada 3h en un registro por día:
    - agrupa por fecha en orden de aparición (no se reordena)
    - descarta el grupo cuya fecha coincide con `today`
    - max/min sobre temp_max y temp_min de todas las muestras, redondeados
    - icono: el de las 12:00:00 si existe (el último visto), si no el primero
    - como mucho MAX_FORECAST_DAYS días
    """
    today = _parse_day(today)

    # validamos todo antes de construir nada: sin salida parcial
    parsed = []
    for s in samples:
        ts = _parse_timestamp(s.timestamp_label)
        _check_temp(s.temp_max, s.timestamp_label)
        _check_temp(s.temp_min, s.timestamp_label)
        parsed.append((ts, s))

    groups: dict[date, dict] = {}
    for ts, s in parsed:
        d = ts.date()
        if d == today:
            continue
        g = groups.setdefault(d, {"temps": [], "midday_icon": None, "first_icon": None})
        g["temps"].extend((s.temp_max, s.temp_min))
        if ts.time() == MIDDAY:
            g["midday_icon"] = s.icon_code
        elif g["first_icon"] is None:
            g["first_icon"] = s.icon_code

    out: list[DailySummary] = []
    for d, g in groups.items():
        # un icono de mediodía vacío no cede el puesto al primero: cae al default
        icon = g["midday_icon"] if g["midday_icon"] is not None else g["first_icon"]
        out.append(DailySummary(
            weekday_label=weekday_label(d),
            icon_code=icon or DEFAULT_ICON,
            temp_max=round_half_away(max(g["temps"])),
            temp_min=round_half_away(min(g["temps"])),
        ))
    return out[:MAX_FORECAST_DAYS]


def samples_from_forecast(payload: dict) -> list[IntervalSample]:
    """Convierte la respuesta /forecast de OpenWeather en IntervalSample."""
    items = payload.get("list")
    if items is None:
        raise MalformedInput("Forecast payload without 'list'")

    out: list[IntervalSample] = []
    for it in items:
        try:
            main = it["main"]
            label = it["dt_txt"]
            t_max = float(main["temp_max"])
            t_min = float(main["temp_min"])
            icon = (it.get("weather") or [{}])[0].get("icon")
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise MalformedInput(f"Invalid forecast item: {e!r}")
        out.append(IntervalSample(
            timestamp_label=label,
            temp_max=_check_temp(t_max, label),
            temp_min=_check_temp(t_min, label),
            icon_code=icon or DEFAULT_ICON,
        ))
    return out
