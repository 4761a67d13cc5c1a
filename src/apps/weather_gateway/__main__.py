"""Weather Gateway Server - Entry point for the HTTP API."""

import logging
import sys

import click
import uvicorn
from dotenv import load_dotenv

from observability import init_tracing
from src.tools.api_tools.openweather.openweather import OpenWeatherClient
from src.tools.data_tools.search_ledger.search_ledger import SearchLedger

from .app import create_app
from .config import GatewaySettings
from .gateway import WeatherGateway


load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class MissingAPIKeyError(Exception):
    """Exception for missing API key."""


@click.command()
@click.option('--host', 'host', default=None, help='Server host (defaults to $HOST)')
@click.option('--port', 'port', default=None, type=int, help='Server port (defaults to $PORT)')
@click.option('--tracing/--no-tracing', default=False, help='Send spans to Phoenix')
def main(host: str | None, port: int | None, tracing: bool):
    """Starts the Weather Gateway server."""
    try:
        settings = GatewaySettings.from_env()
        if host:
            settings.host = host
        if port:
            settings.port = port

        if not settings.api_key:
            raise MissingAPIKeyError(
                'OPENWEATHER_API_KEY environment variable not set.'
            )

        if tracing:
            init_tracing(project_name='weather-gateway')

        ledger = None
        if settings.persist:
            ledger = SearchLedger(
                settings.db_path,
                pool_size=settings.db_pool_size,
                acquire_timeout=settings.db_acquire_timeout,
            )
        else:
            logger.info('Search history disabled (WEATHER_PERSIST is off)')

        provider = OpenWeatherClient(settings.api_key, base_url=settings.base_url)
        gateway = WeatherGateway(provider, ledger)

        app = create_app(
            gateway,
            ledger,
            allowed_origins=settings.allowed_origins,
            connect_attempts=settings.db_connect_attempts,
            connect_delay=settings.db_connect_delay,
        )

        logger.info(f'Starting Weather Gateway at http://{settings.host}:{settings.port}')
        uvicorn.run(app, host=settings.host, port=settings.port)

    except MissingAPIKeyError as e:
        logger.error(f'Error: {e}')
        sys.exit(1)
    except Exception as e:
        logger.error(f'An error occurred during server startup: {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
