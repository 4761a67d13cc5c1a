"""Smoke client for a running Weather Gateway.

Run with: python -m src.apps.weather_gateway.smoke_client [BASE_URL]
"""

import asyncio
import logging
import sys

import httpx

from src.tools.shared_libraries.helpers import format_weather_summary


async def main(base_url: str = 'http://localhost:10000') -> None:
    """Run smoke scenarios against the gateway."""
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    async with httpx.AsyncClient(base_url=base_url, timeout=15.0) as client:
        # Test 1: Health
        logger.info('=' * 50)
        logger.info('Test 1: Health')
        logger.info('=' * 50)
        try:
            response = await client.get('/api/health')
        except httpx.HTTPError as e:
            logger.error(f'Gateway not reachable at {base_url}: {e}')
            raise RuntimeError('Gateway not reachable.') from e
        logger.info(response.json())

        # Test 2: Current weather and forecast, issued concurrently
        logger.info('=' * 50)
        logger.info('Test 2: Current Weather + Forecast')
        logger.info('=' * 50)
        current, forecast = await asyncio.gather(
            client.get('/api/weather', params={'city': 'Seoul'}),
            client.get('/api/forecast', params={'city': 'Seoul'}),
        )
        logger.info(f'{current.status_code} {format_weather_summary(current.json())}')
        if forecast.is_success:
            for entry in forecast.json():
                logger.info(f"  {entry['date']}: {format_weather_summary(entry)}")
        else:
            logger.info(f'{forecast.status_code} {forecast.json()}')

        # Test 3: Coordinates
        logger.info('=' * 50)
        logger.info('Test 3: Coordinate Lookup')
        logger.info('=' * 50)
        response = await client.get('/api/weather', params={'lat': 35.68, 'lon': 139.69})
        logger.info(f'{response.status_code} {format_weather_summary(response.json())}')

        # Test 4: Unknown city and missing query
        logger.info('=' * 50)
        logger.info('Test 4: Error Cases')
        logger.info('=' * 50)
        for params in ({'city': 'NoSuchCityXyz'}, {}):
            response = await client.get('/api/weather', params=params)
            logger.info(f'{params} -> {response.status_code} {response.json()}')

        # Test 5: History
        logger.info('=' * 50)
        logger.info('Test 5: Search History')
        logger.info('=' * 50)
        response = await client.get('/api/history')
        logger.info(f'{response.status_code} {response.json()}')


if __name__ == '__main__':
    asyncio.run(main(*sys.argv[1:2]))
