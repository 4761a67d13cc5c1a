"""Shared presentation helpers for weather readings."""

from datetime import datetime


def format_temperature(temp: float, units: str = 'metric', digits: int = 0) -> str:
    """Format temperature with unit symbol.

    Readings keep the provider's precision; rounding only happens here.

    Args:
        temp: Temperature value.
        units: "metric" for Celsius, "imperial" for Fahrenheit.
        digits: Decimal places to keep. Defaults to whole degrees.

    Returns:
        Formatted temperature string.
    """
    unit_symbol = '°C' if units == 'metric' else '°F'
    return f'{round(temp, digits):.{digits}f}{unit_symbol}'


def get_timestamp() -> str:
    """Get current timestamp in ISO format.

    Returns:
        ISO formatted timestamp string.
    """
    return datetime.now().isoformat()


def format_forecast_day(date_text: str) -> str:
    """Turn a provider timestamp like "2024-01-01 12:00:00" into "Mon 01 Jan"."""
    try:
        moment = datetime.fromisoformat(date_text)
    except ValueError:
        return date_text
    return moment.strftime('%a %d %b')


def format_weather_summary(weather_data: dict) -> str:
    """Format weather data into a human-readable summary.

    Args:
        weather_data: Normalized reading, or an error body.

    Returns:
        Formatted weather summary string.
    """
    if 'error' in weather_data:
        return f"Error: {weather_data['error']}"

    city = weather_data.get('city', 'Unknown')
    country = weather_data.get('country', '')
    temp = weather_data.get('temperature', 'N/A')
    desc = weather_data.get('description', 'N/A')
    humidity = weather_data.get('humidity', 'N/A')
    wind = weather_data.get('wind_speed', 'N/A')

    location = f'{city}, {country}' if country else city
    temp_str = format_temperature(temp) if isinstance(temp, (int, float)) else temp

    return (
        f'{location}: {temp_str}, {desc}, '
        f'Humidity: {humidity}%, Wind: {wind} m/s'
    )
