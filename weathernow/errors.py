class MalformedInput(ValueError):
    """Datos de entrada que no se pueden interpretar (p.ej. fecha ilegible)."""


class WeatherSourceError(Exception):
    """Error de la fuente de datos (OpenWeather o fixtures)."""

    status_code = 502

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotFound(WeatherSourceError):
    status_code = 404


class Unauthorized(WeatherSourceError):
    status_code = 401


class NetworkFailure(WeatherSourceError):
    status_code = 503
