"""WeatherNow: tiempo actual y previsión a 5 días."""
