"""Shared fixtures: a stubbed provider and a temporary ledger."""

import os
import tempfile

import httpx
import pytest

from src.tools.api_tools.openweather.openweather import OpenWeatherClient
from src.tools.data_tools.search_ledger.search_ledger import SearchLedger


def current_payload(city='London', temp=15.3, description='light rain'):
    return {
        'main': {'temp': temp, 'feels_like': 14.1, 'humidity': 70, 'pressure': 1012},
        'weather': [{'description': description, 'icon': '10d'}],
        'wind': {'speed': 4.2},
        'name': city,
        'sys': {'country': 'GB'},
    }


def forecast_payload(slots=40):
    items = []
    for i in range(slots):
        day, hour = divmod(i * 3, 24)
        items.append({
            'dt_txt': f'2024-01-{day + 1:02d} {hour:02d}:00:00',
            'main': {'temp': 10.0 + i, 'feels_like': 8.0, 'humidity': 50, 'pressure': 1000},
            'weather': [{'description': 'cloudy', 'icon': '04d'}],
            'wind': {'speed': 5.0},
        })
    return {'city': {'name': 'London', 'country': 'GB'}, 'list': items}


class ProviderStub:
    """Answers provider requests and remembers them.

    `status` and `body` override the default success payloads; a `body`
    is returned as-is even with status 200.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body: dict | list | None = None
        self.temperatures: list[float] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200 or self.body is not None:
            body = self.body if self.body is not None else {}
            return httpx.Response(self.status, json=body)
        if request.url.path.endswith('/forecast'):
            return httpx.Response(200, json=forecast_payload())
        temp = self.temperatures.pop(0) if self.temperatures else 15.3
        return httpx.Response(200, json=current_payload(temp=temp))

    def client(self) -> OpenWeatherClient:
        transport = httpx.MockTransport(self)
        return OpenWeatherClient(
            'test_api_key',
            http_client=httpx.AsyncClient(transport=transport),
        )


@pytest.fixture
def provider():
    return ProviderStub()


@pytest.fixture
def ledger():
    """An initialized ledger in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        ledger = SearchLedger(os.path.join(tmpdir, 'weather.db'))
        ledger.init_db()
        yield ledger
        ledger.close()
