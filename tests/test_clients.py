import pytest
import httpx
from weathernow import clients
from weathernow.aggregations import IntervalSample
from weathernow.errors import NetworkFailure, NotFound, Unauthorized, WeatherSourceError

class FakeResp:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data if json_data is not None else {}
        self.text = text
    def json(self):
        return self._json


@pytest.fixture
def fake_client(monkeypatch):
    """Sustituye httpx.AsyncClient; devuelve la lista de llamadas y un setter de respuesta."""
    calls = []
    state = {"handler": lambda n: FakeResp(200, {})}

    class DummyClient:
        def __init__(self, *a, **k): pass
        async def __aenter__(self): return self
        async def __aexit__(self, *a): pass
        async def get(self, url, params=None):
            calls.append((url, params))
            return state["handler"](len(calls))

    monkeypatch.setattr(clients.httpx, "AsyncClient", DummyClient)
    monkeypatch.setattr(clients, "OPENWEATHER_API_KEY", "test-key")
    monkeypatch.setattr(clients, "BACKOFF_BASE", 0)

    def respond(handler):
        state["handler"] = handler

    return calls, respond


@pytest.mark.asyncio
async def test_fetch_current_reintentos_y_exito(fake_client):
    calls, respond = fake_client
    def handler(n):
        if n < 3:
            raise httpx.RequestError("fail")
        return FakeResp(200, {"name": "Madrid"})
    respond(handler)

    js = await clients.fetch_current("Madrid")
    assert js["name"] == "Madrid"
    assert len(calls) == 3  # 2 fallos + 1 éxito
    url, params = calls[0]
    assert url.endswith("/weather")
    assert params == {"q": "Madrid", "appid": "test-key", "units": "metric"}


@pytest.mark.asyncio
async def test_404_no_reintenta(fake_client):
    calls, respond = fake_client
    respond(lambda n: FakeResp(404, text="city not found"))

    with pytest.raises(NotFound):
        await clients.fetch_current("Atlantis")
    assert len(calls) == 1  # Y NO reintentamos


@pytest.mark.asyncio
async def test_401_unauthorized(fake_client):
    calls, respond = fake_client
    respond(lambda n: FakeResp(401, text="Invalid API key"))

    with pytest.raises(Unauthorized) as ei:
        await clients.fetch_forecast("Madrid")
    assert ei.value.status_code == 401
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_otro_4xx_se_propaga(fake_client):
    calls, respond = fake_client
    respond(lambda n: FakeResp(429, text="too many"))

    with pytest.raises(WeatherSourceError) as ei:
        await clients.fetch_current("Madrid")
    assert ei.value.status_code == 429
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_5xx_agota_reintentos(fake_client):
    calls, respond = fake_client
    respond(lambda n: FakeResp(500, text="server error"))

    with pytest.raises(NetworkFailure) as ei:
        await clients.fetch_current("Madrid")
    assert ei.value.status_code == 503
    assert len(calls) == clients.MAX_RETRIES


@pytest.mark.asyncio
async def test_sin_api_key(fake_client, monkeypatch):
    calls, _ = fake_client
    monkeypatch.setattr(clients, "OPENWEATHER_API_KEY", "")

    with pytest.raises(Unauthorized):
        await clients.fetch_current("Madrid")
    assert calls == []


@pytest.mark.asyncio
async def test_fetch_forecast_devuelve_muestras(fake_client):
    calls, respond = fake_client
    respond(lambda n: FakeResp(200, {"list": [
        {"dt_txt": "2025-10-16 12:00:00", "main": {"temp_max": 17.2, "temp_min": 12.1}, "weather": [{"icon": "10d"}]},
    ]}))

    samples = await clients.fetch_forecast("Madrid")
    assert samples == [IntervalSample("2025-10-16 12:00:00", 17.2, 12.1, "10d")]
    assert calls[0][0].endswith("/forecast")
