"""OpenWeatherMap client - one outbound call per lookup, normalized results."""

import logging

import httpx
from pydantic import ValidationError

from observability import trace_tool
from src.tools.shared_libraries.errors import (
    NotFound,
    UpstreamConfigError,
    UpstreamUnavailable,
    WeatherServiceError,
)

from .models import ForecastEntry, WeatherQuery, WeatherReading


logger = logging.getLogger(__name__)

BASE_URL = 'https://api.openweathermap.org/data/2.5'

# The forecast endpoint returns 3-hour slots, so every 8th slot is one per day.
FORECAST_STRIDE = 8
FORECAST_DAYS = 5


def classify_provider_error(
    status_code: int,
    message: str | None = None,
) -> WeatherServiceError:
    """Map a provider HTTP status to the service error taxonomy.

    Args:
        status_code: HTTP status returned by the provider.
        message: The provider's own error message, if it sent one.

    Returns:
        The exception to raise for this status.
    """
    if status_code == 404:
        return NotFound('City not found', details=message)
    if status_code == 401:
        return UpstreamConfigError(
            'Weather provider rejected the API key', details=message
        )
    return UpstreamUnavailable('Failed to fetch weather data', details=message)


def _error_message(response: httpx.Response) -> str | None:
    """The provider's `message` field from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return None


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _reading_fields(item: dict) -> dict:
    main = _as_dict(item.get('main'))
    conditions = item.get('weather')
    weather = _as_dict(conditions[0]) if isinstance(conditions, list) and conditions else {}
    return {
        'temperature': main.get('temp'),
        'feels_like': main.get('feels_like'),
        'humidity': main.get('humidity'),
        'pressure': main.get('pressure'),
        'description': weather.get('description'),
        'icon': weather.get('icon'),
        'wind_speed': _as_dict(item.get('wind')).get('speed'),
    }


def normalize_current(payload: dict) -> WeatherReading:
    """Reshape a provider current-conditions payload into a WeatherReading."""
    payload = _as_dict(payload)
    try:
        return WeatherReading(
            city=payload.get('name'),
            country=_as_dict(payload.get('sys')).get('country'),
            **_reading_fields(payload),
        )
    except ValidationError as e:
        raise UpstreamUnavailable(
            'Malformed weather data from provider', details=str(e)
        ) from e


def normalize_forecast(payload: dict) -> list[ForecastEntry]:
    """Pick one reading per day from a provider forecast payload.

    Returns:
        At most five entries in chronological order.
    """
    payload = _as_dict(payload)
    city = _as_dict(payload.get('city'))
    slots = payload.get('list')
    if not isinstance(slots, list):
        raise UpstreamUnavailable('Malformed forecast data from provider')
    try:
        entries = [
            ForecastEntry(
                city=city.get('name') or '',
                country=city.get('country'),
                date=_as_dict(item).get('dt_txt'),
                **_reading_fields(_as_dict(item)),
            )
            for item in slots[::FORECAST_STRIDE][:FORECAST_DAYS]
        ]
    except ValidationError as e:
        raise UpstreamUnavailable(
            'Malformed forecast data from provider', details=str(e)
        ) from e
    return sorted(entries, key=lambda entry: entry.date)


class OpenWeatherClient:
    """Async client for the provider's current and forecast endpoints."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def _get(self, endpoint: str, query: WeatherQuery) -> dict:
        if not self.api_key:
            raise UpstreamConfigError(
                'OPENWEATHER_API_KEY environment variable not set.'
            )

        params = {**query.to_params(), 'appid': self.api_key, 'units': 'metric'}
        try:
            response = await self._http.get(f'{self.base_url}/{endpoint}', params=params)
        except httpx.HTTPError as e:
            logger.error(f'Weather API request to /{endpoint} failed: {e}')
            raise UpstreamUnavailable(
                'Failed to fetch weather data', details=str(e)
            ) from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                f'Weather API /{endpoint} returned {response.status_code} '
                f'for {query.describe()}: {message}'
            )
            raise classify_provider_error(response.status_code, message)

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamUnavailable('Invalid JSON response from API.') from e
        if not isinstance(body, dict):
            raise UpstreamUnavailable(
                'Invalid JSON response from API.',
                details=f'expected an object, got {type(body).__name__}',
            )
        return body

    @trace_tool(name='provider.fetch_current')
    async def fetch_current(self, query: WeatherQuery) -> WeatherReading:
        """Get current conditions for a query, in metric units."""
        return normalize_current(await self._get('weather', query))

    @trace_tool(name='provider.fetch_forecast')
    async def fetch_forecast(self, query: WeatherQuery) -> list[ForecastEntry]:
        """Get up to five daily forecast entries for a query."""
        return normalize_forecast(await self._get('forecast', query))

    async def aclose(self) -> None:
        await self._http.aclose()
