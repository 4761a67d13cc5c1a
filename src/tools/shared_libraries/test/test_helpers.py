"""Unit tests for shared helpers and the error taxonomy."""

from src.tools.shared_libraries.errors import (
    InvalidQuery,
    NotFound,
    StoreUnavailable,
    UpstreamConfigError,
    UpstreamUnavailable,
)
from src.tools.shared_libraries.helpers import (
    format_forecast_day,
    format_temperature,
    format_weather_summary,
)


class TestFormatTemperature:
    """Tests for presentation-time rounding."""

    def test_rounds_to_whole_degrees(self):
        assert format_temperature(15.3) == '15°C'
        assert format_temperature(14.6) == '15°C'

    def test_keeps_requested_digits(self):
        assert format_temperature(15.34, digits=1) == '15.3°C'

    def test_imperial_symbol(self):
        assert format_temperature(59.5, units='imperial') == '60°F'


class TestFormatWeatherSummary:
    """Tests for format_weather_summary."""

    def test_summary(self):
        summary = format_weather_summary({
            'city': 'London',
            'country': 'GB',
            'temperature': 15.3,
            'description': 'light rain',
            'humidity': 70,
            'wind_speed': 4.2,
        })

        assert summary == 'London, GB: 15°C, light rain, Humidity: 70%, Wind: 4.2 m/s'

    def test_error_body(self):
        assert format_weather_summary({'error': 'City not found'}) == 'Error: City not found'


def test_format_forecast_day():
    assert format_forecast_day('2024-01-01 12:00:00') == 'Mon 01 Jan'
    assert format_forecast_day('not a date') == 'not a date'


class TestErrorTaxonomy:
    """Tests for status codes and error bodies."""

    def test_status_codes(self):
        assert InvalidQuery('x').status_code == 400
        assert NotFound('x').status_code == 404
        assert UpstreamConfigError('x').status_code == 500
        assert UpstreamUnavailable('x').status_code == 500
        assert StoreUnavailable('x').status_code == 500

    def test_body_includes_details_only_when_present(self):
        assert NotFound('City not found').to_dict() == {'error': 'City not found'}
        assert UpstreamConfigError('bad key', details='Invalid API key').to_dict() == {
            'error': 'bad key',
            'details': 'Invalid API key',
        }
