"""Weather Gateway - provider lookups with search history write-through."""

import asyncio
import logging

from observability import trace_span
from src.tools.api_tools.openweather.models import (
    ForecastEntry,
    WeatherQuery,
    WeatherReading,
)
from src.tools.api_tools.openweather.openweather import OpenWeatherClient
from src.tools.data_tools.search_ledger.search_ledger import SearchLedger
from src.tools.shared_libraries.errors import StoreUnavailable


logger = logging.getLogger(__name__)


class WeatherGateway:
    """Looks up weather through the provider and records current lookups.

    The ledger is optional. Writes to it run in the background and never
    change the outcome of a lookup.
    """

    def __init__(
        self,
        provider: OpenWeatherClient,
        ledger: SearchLedger | None = None,
    ):
        self.provider = provider
        self.ledger = ledger
        self._pending: set[asyncio.Task] = set()

    @trace_span('gateway.get_current')
    async def get_current(self, query: WeatherQuery) -> WeatherReading:
        """Current conditions for a query.

        Raises:
            InvalidQuery: The query has neither a city nor coordinates.
            NotFound: The provider does not know the city.
            UpstreamConfigError: The API key is missing or rejected.
            UpstreamUnavailable: Any other provider or network failure.
        """
        query.check()
        reading = await self.provider.fetch_current(query)
        self._schedule_record(reading)
        return reading

    @trace_span('gateway.get_forecast')
    async def get_forecast(self, query: WeatherQuery) -> list[ForecastEntry]:
        """Up to five daily forecast entries, oldest first."""
        query.check()
        return await self.provider.fetch_forecast(query)

    @trace_span('gateway.get_overview')
    async def get_overview(self, query: WeatherQuery) -> dict:
        """Current conditions and forecast, fetched concurrently."""
        query.check()
        current, forecast = await asyncio.gather(
            self.get_current(query),
            self.get_forecast(query),
        )
        return {'current': current, 'forecast': forecast}

    def _schedule_record(self, reading: WeatherReading) -> None:
        if self.ledger is None:
            return
        task = asyncio.create_task(self._record(reading))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _record(self, reading: WeatherReading) -> None:
        try:
            await asyncio.to_thread(
                self.ledger.record,
                reading.city,
                reading.temperature,
                reading.description,
            )
        except StoreUnavailable as e:
            logger.error(
                f'Failed to record search for {reading.city}: '
                f'{e.message} ({e.details})'
            )

    async def drain(self) -> None:
        """Wait for every pending history write to finish."""
        if self._pending:
            logger.info(f'Waiting for {len(self._pending)} pending history write(s)')
            results = await asyncio.gather(*self._pending, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f'History write failed: {type(result).__name__}: {result}')

    async def aclose(self) -> None:
        await self.drain()
        await self.provider.aclose()
