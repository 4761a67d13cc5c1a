"""HTTP surface of the weather gateway."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.tools.api_tools.openweather.models import (
    ForecastEntry,
    WeatherQuery,
    WeatherReading,
)
from src.tools.data_tools.search_ledger.models import SearchRecord
from src.tools.data_tools.search_ledger.search_ledger import MAX_RECENT, SearchLedger
from src.tools.shared_libraries.errors import StoreUnavailable, WeatherServiceError
from src.tools.shared_libraries.helpers import get_timestamp

from .gateway import WeatherGateway


logger = logging.getLogger(__name__)


def get_gateway(request: Request) -> WeatherGateway:
    return request.app.state.gateway


def get_ledger(request: Request) -> SearchLedger | None:
    return request.app.state.ledger


def create_app(
    gateway: WeatherGateway,
    ledger: SearchLedger | None = None,
    allowed_origins: list[str] | None = None,
    connect_attempts: int = 5,
    connect_delay: float = 2.0,
) -> FastAPI:
    """Build the FastAPI application around explicitly constructed handles.

    Args:
        gateway: Gateway used by the weather and forecast routes.
        ledger: Search history store, or None when persistence is off.
        allowed_origins: Browser origins allowed by CORS. Defaults to all.
        connect_attempts: Startup attempts to reach the ledger.
        connect_delay: Seconds between startup attempts.

    Returns:
        The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ledger is not None:
            await asyncio.to_thread(ledger.connect_with_retry, connect_attempts, connect_delay)
        yield
        await gateway.aclose()
        if ledger is not None:
            ledger.close()

    app = FastAPI(title='Weather Gateway', version='1.0.0', lifespan=lifespan)
    app.state.gateway = gateway
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ['*'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.exception_handler(WeatherServiceError)
    async def handle_service_error(request: Request, exc: WeatherServiceError):
        if exc.status_code >= 500:
            logger.error(f'{request.url.path} failed: {exc.message} ({exc.details})')
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        details = '; '.join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={'error': 'Invalid request parameters', 'details': details},
        )

    @app.get('/api/weather', response_model=WeatherReading)
    async def current_weather(
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
        gateway: WeatherGateway = Depends(get_gateway),
    ):
        query = WeatherQuery.from_params(city, lat, lon)
        return await gateway.get_current(query)

    @app.get('/api/weather/{city}', response_model=WeatherReading)
    async def current_weather_by_path(
        city: str,
        gateway: WeatherGateway = Depends(get_gateway),
    ):
        return await gateway.get_current(WeatherQuery.from_params(city=city))

    @app.get('/api/forecast', response_model=list[ForecastEntry])
    async def forecast(
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
        gateway: WeatherGateway = Depends(get_gateway),
    ):
        query = WeatherQuery.from_params(city, lat, lon)
        return await gateway.get_forecast(query)

    @app.get('/api/overview')
    async def overview(
        city: str | None = None,
        lat: float | None = None,
        lon: float | None = None,
        gateway: WeatherGateway = Depends(get_gateway),
    ):
        query = WeatherQuery.from_params(city, lat, lon)
        result = await gateway.get_overview(query)
        return {
            'current': result['current'].model_dump(),
            'forecast': [entry.model_dump() for entry in result['forecast']],
        }

    @app.get('/api/history', response_model=list[SearchRecord])
    def history(
        limit: int = Query(MAX_RECENT, ge=1),
        ledger: SearchLedger | None = Depends(get_ledger),
    ):
        if ledger is None:
            raise StoreUnavailable('Search history is disabled')
        return ledger.recent(limit)

    @app.get('/api/health')
    def health(ledger: SearchLedger | None = Depends(get_ledger)):
        connected = ledger is not None and ledger.ping()
        return {
            'status': 'OK',
            'database': 'Connected' if connected else 'Disconnected',
            'timestamp': get_timestamp(),
        }

    return app
