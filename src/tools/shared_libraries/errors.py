"""Error taxonomy shared by the gateway, provider client and ledger."""


class WeatherServiceError(Exception):
    """Base exception carrying an HTTP status and a user-facing message."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Render the JSON error body returned to API callers."""
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class InvalidQuery(WeatherServiceError):
    """Exception for a query with neither a city nor coordinates."""

    status_code = 400


class NotFound(WeatherServiceError):
    """Exception for a city the provider does not know."""

    status_code = 404


class UpstreamConfigError(WeatherServiceError):
    """Exception for a missing or rejected provider API key."""


class UpstreamUnavailable(WeatherServiceError):
    """Exception for any other provider or network failure."""


class StoreUnavailable(WeatherServiceError):
    """Exception for an unreachable search history store."""
