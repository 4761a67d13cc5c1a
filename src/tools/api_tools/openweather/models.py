"""Query and reading models for the OpenWeatherMap integration."""

from pydantic import BaseModel, model_validator

from src.tools.shared_libraries.errors import InvalidQuery


class WeatherQuery(BaseModel):
    """A lookup by city name or by coordinates.

    A full coordinate pair takes precedence over a city name. Construction
    raises InvalidQuery when neither form is usable.
    """

    city: str | None = None
    lat: float | None = None
    lon: float | None = None

    @model_validator(mode='after')
    def _require_lookup(self) -> 'WeatherQuery':
        self.check()
        return self

    @classmethod
    def from_params(
        cls,
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
    ) -> 'WeatherQuery':
        """Build a query from raw request parameters.

        Raises:
            InvalidQuery: If neither a city nor both coordinates are given,
                or a coordinate is out of range.
        """
        if lat is not None and lon is not None:
            return cls(lat=lat, lon=lon)
        return cls(city=(city or '').strip())

    @property
    def by_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    def check(self) -> None:
        """Raise InvalidQuery unless this is a usable city or coordinate lookup."""
        if self.by_coordinates:
            if not -90 <= self.lat <= 90 or not -180 <= self.lon <= 180:
                raise InvalidQuery('Coordinates out of range')
            return
        if not (self.city or '').strip():
            raise InvalidQuery('Please provide city or coordinates')

    def to_params(self) -> dict:
        """Provider query parameters for this lookup."""
        if self.by_coordinates:
            return {'lat': self.lat, 'lon': self.lon}
        return {'q': self.city.strip()}

    def describe(self) -> str:
        if self.by_coordinates:
            return f'{self.lat},{self.lon}'
        return self.city


class WeatherReading(BaseModel):
    """A single normalized weather observation."""

    city: str
    country: str | None = None
    temperature: float
    feels_like: float | None = None
    humidity: int | None = None
    pressure: int | None = None
    description: str
    icon: str | None = None
    wind_speed: float | None = None


class ForecastEntry(WeatherReading):
    """A reading for one forecast day."""

    date: str
