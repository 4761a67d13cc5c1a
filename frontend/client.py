"""Weather Gateway client - query building and response handling for any UI."""

import asyncio

import httpx


DEFAULT_BASE_URL = 'http://localhost:10000'

WEATHER_ICONS = {
    '01d': '☀️', '01n': '🌙',
    '02d': '⛅', '02n': '☁️',
    '03d': '☁️', '03n': '☁️',
    '04d': '☁️', '04n': '☁️',
    '09d': '🌧️', '09n': '🌧️',
    '10d': '🌦️', '10n': '🌦️',
    '11d': '⛈️', '11n': '⛈️',
    '13d': '❄️', '13n': '❄️',
    '50d': '🌫️', '50n': '🌫️',
}


class ApiError(Exception):
    """Error body returned by the gateway, or a transport failure (status 0)."""

    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    @property
    def offline(self) -> bool:
        return self.status_code == 0


def icon_for(code: str | None) -> str:
    return WEATHER_ICONS.get(code or '', '🌤️')


def build_query_params(
    city: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
) -> dict:
    """Query string for the weather and forecast routes.

    Raises:
        ValueError: If neither a city nor both coordinates are given.
    """
    if lat is not None and lon is not None:
        return {'lat': lat, 'lon': lon}
    city = (city or '').strip()
    if not city:
        raise ValueError('Please enter a city name')
    return {'city': city}


def _unwrap(response: httpx.Response):
    if response.is_success:
        return response.json()
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    raise ApiError(
        response.status_code,
        body.get('error') or f'Request failed with status {response.status_code}',
        body.get('details'),
    )


class WeatherApiClient:
    """Client for the gateway's HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict | None = None):
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise ApiError(0, 'Weather service is unreachable', str(e)) from e
        return _unwrap(response)

    async def _fetch(self, path: str, params: dict | None = None):
        async with self._client() as client:
            return await self._get(client, path, params)

    def current(self, **query) -> dict:
        return asyncio.run(self._fetch('/api/weather', build_query_params(**query)))

    def forecast(self, **query) -> list[dict]:
        return asyncio.run(self._fetch('/api/forecast', build_query_params(**query)))

    def history(self, limit: int = 10) -> list[dict]:
        return asyncio.run(self._fetch('/api/history', {'limit': limit}))

    def health(self) -> dict:
        return asyncio.run(self._fetch('/api/health'))

    async def _lookup(self, params: dict) -> tuple[dict, list[dict]]:
        async with self._client() as client:
            current, forecast = await asyncio.gather(
                self._get(client, '/api/weather', params),
                self._get(client, '/api/forecast', params),
            )
        return current, forecast

    def lookup(self, **query) -> tuple[dict, list[dict]]:
        """Current conditions and forecast, requested concurrently."""
        return asyncio.run(self._lookup(build_query_params(**query)))


def demo_weather() -> dict:
    """Sample reading shown when the gateway cannot be reached."""
    return {
        'city': 'London',
        'country': 'GB',
        'temperature': 15.0,
        'feels_like': 14.0,
        'humidity': 72,
        'pressure': 1013,
        'description': 'partly cloudy',
        'icon': '02d',
        'wind_speed': 3.6,
    }


def demo_forecast() -> list[dict]:
    """Sample five-day forecast matching demo_weather()."""
    days = [
        ('2024-01-01 12:00:00', 16.0, 'clear sky', '01d'),
        ('2024-01-02 12:00:00', 14.0, 'light rain', '10d'),
        ('2024-01-03 12:00:00', 12.0, 'overcast clouds', '04d'),
        ('2024-01-04 12:00:00', 13.0, 'scattered clouds', '03d'),
        ('2024-01-05 12:00:00', 17.0, 'clear sky', '01d'),
    ]
    base = demo_weather()
    return [
        {**base, 'date': date, 'temperature': temp, 'description': desc, 'icon': icon}
        for date, temp, desc, icon in days
    ]
