"""HTTP tests for the weather gateway routes."""

import os
import tempfile
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.apps.weather_gateway.app import create_app
from src.apps.weather_gateway.gateway import WeatherGateway
from src.tools.data_tools.search_ledger.search_ledger import SearchLedger
from src.tools.shared_libraries.errors import StoreUnavailable


LONDON_READING = {
    'city': 'London',
    'country': 'GB',
    'temperature': 15.3,
    'feels_like': 14.1,
    'humidity': 70,
    'pressure': 1012,
    'description': 'light rain',
    'icon': '10d',
    'wind_speed': 4.2,
}

LONDON_PAYLOAD = {
    'main': {'temp': 15.3, 'feels_like': 14.1, 'humidity': 70, 'pressure': 1012},
    'weather': [{'description': 'light rain', 'icon': '10d'}],
    'wind': {'speed': 4.2},
    'name': 'London',
    'sys': {'country': 'GB'},
}


def make_client(provider, ledger):
    gateway = WeatherGateway(provider.client(), ledger)
    app = create_app(gateway, ledger, connect_attempts=1, connect_delay=0)
    return TestClient(app), gateway


@pytest.fixture
def api(provider, ledger):
    client, gateway = make_client(provider, ledger)
    with client:
        yield client, gateway


class TestWeatherRoute:
    """Tests for GET /api/weather."""

    def test_city_lookup(self, api, provider):
        client, _ = api

        response = client.get('/api/weather', params={'city': 'London'})

        assert response.status_code == 200
        assert response.json() == LONDON_READING
        assert provider.requests[0].url.params['q'] == 'London'

    def test_coordinate_lookup(self, api, provider):
        client, _ = api

        response = client.get('/api/weather', params={'lat': 51.51, 'lon': -0.13})

        assert response.status_code == 200
        assert provider.requests[0].url.params['lat'] == '51.51'

    def test_path_form(self, api):
        client, _ = api

        response = client.get('/api/weather/London')

        assert response.status_code == 200
        assert response.json()['city'] == 'London'

    @pytest.mark.parametrize('params', [{}, {'city': ''}, {'lat': 10.0}])
    def test_missing_query_makes_no_outbound_call(self, api, provider, params):
        client, _ = api

        response = client.get('/api/weather', params=params)

        assert response.status_code == 400
        assert 'error' in response.json()
        assert provider.requests == []

    def test_non_numeric_coordinates(self, api, provider):
        client, _ = api

        response = client.get('/api/weather', params={'lat': 'north', 'lon': '0'})

        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid request parameters'
        assert provider.requests == []

    def test_city_not_found(self, api, provider):
        client, _ = api
        provider.status = 404
        provider.body = {'cod': '404', 'message': 'city not found'}

        response = client.get('/api/weather', params={'city': 'Atlantis'})

        assert response.status_code == 404
        assert response.json() == {'error': 'City not found', 'details': 'city not found'}

    def test_bad_api_key(self, api, provider):
        client, _ = api
        provider.status = 401
        provider.body = {'cod': 401, 'message': 'Invalid API key.'}

        response = client.get('/api/weather', params={'city': 'London'})

        assert response.status_code == 500
        assert response.json()['details'] == 'Invalid API key.'

    def test_provider_down(self, api, provider):
        client, _ = api
        provider.status = 503

        response = client.get('/api/weather', params={'city': 'London'})

        assert response.status_code == 500
        assert response.json()['error'] == 'Failed to fetch weather data'

    @pytest.mark.parametrize('body', [
        [],
        {**LONDON_PAYLOAD, 'main': None},
        {**LONDON_PAYLOAD, 'sys': None, 'weather': None},
    ])
    @pytest.mark.parametrize('path', ['/api/weather', '/api/forecast'])
    def test_odd_provider_body_gets_json_error(self, api, provider, body, path):
        client, _ = api
        provider.body = body

        response = client.get(path, params={'city': 'London'})

        assert response.status_code == 500
        assert 'error' in response.json()

    def test_store_outage_leaves_response_unchanged(self, provider, ledger):
        healthy, _ = make_client(provider, ledger)
        with healthy:
            expected = healthy.get('/api/weather', params={'city': 'London'})

        broken = MagicMock(spec=SearchLedger)
        broken.record.side_effect = StoreUnavailable('Failed to save search')
        outage, gateway = make_client(provider, broken)
        with outage:
            response = outage.get('/api/weather', params={'city': 'London'})
            outage.portal.call(gateway.drain)

        assert response.status_code == expected.status_code
        assert response.json() == expected.json()
        broken.record.assert_called_once()


class TestForecastRoute:
    """Tests for GET /api/forecast."""

    def test_forecast(self, api):
        client, _ = api

        response = client.get('/api/forecast', params={'city': 'London'})

        assert response.status_code == 200
        entries = response.json()
        assert len(entries) == 5
        dates = [entry['date'] for entry in entries]
        assert dates == sorted(dates)

    def test_not_found(self, api, provider):
        client, _ = api
        provider.status = 404

        response = client.get('/api/forecast', params={'city': 'Atlantis'})

        assert response.status_code == 404

    def test_missing_query(self, api, provider):
        client, _ = api

        assert client.get('/api/forecast').status_code == 400
        assert provider.requests == []


def test_overview(api):
    client, _ = api

    response = client.get('/api/overview', params={'city': 'London'})

    assert response.status_code == 200
    body = response.json()
    assert body['current'] == LONDON_READING
    assert len(body['forecast']) == 5


class TestHistoryRoute:
    """Tests for GET /api/history."""

    def test_history_after_lookups(self, api, provider):
        client, gateway = api
        provider.temperatures = [10.0, 11.0, 12.0]
        for _ in range(3):
            client.get('/api/weather', params={'city': 'London'})
            client.portal.call(gateway.drain)

        response = client.get('/api/history')

        assert response.status_code == 200
        rows = response.json()
        assert [row['temperature'] for row in rows] == [12.0, 11.0, 10.0]
        assert all(row['city'] == 'London' for row in rows)
        assert all(row['description'] == 'light rain' for row in rows)
        assert {'id', 'search_date'} <= set(rows[0])

    def test_history_is_capped(self, api, ledger):
        client, _ = api
        for i in range(15):
            ledger.record(f'City {i}', 10.0, 'clear sky')

        assert len(client.get('/api/history').json()) == 10
        assert len(client.get('/api/history', params={'limit': 2}).json()) == 2

    def test_store_unreachable(self, provider):
        with tempfile.TemporaryDirectory() as tmpdir:
            ledger = SearchLedger(os.path.join(tmpdir, 'missing', 'weather.db'))
            client, _ = make_client(provider, ledger)
            with client:
                response = client.get('/api/history')

        assert response.status_code == 500
        assert response.json()['error'] == 'Search history store is unreachable'

    def test_history_disabled(self, provider):
        client, _ = make_client(provider, None)
        with client:
            response = client.get('/api/history')

        assert response.status_code == 500
        assert response.json() == {'error': 'Search history is disabled'}


class TestHealthRoute:
    """Tests for GET /api/health."""

    def test_connected(self, api):
        client, _ = api

        body = client.get('/api/health').json()

        assert body['status'] == 'OK'
        assert body['database'] == 'Connected'

    def test_disconnected(self, provider):
        client, _ = make_client(provider, None)
        with client:
            response = client.get('/api/health')

        assert response.status_code == 200
        assert response.json()['database'] == 'Disconnected'
