"""Gateway settings loaded from the environment."""

import os

from pydantic import BaseModel, Field

from src.tools.api_tools.openweather.openweather import BASE_URL
from src.tools.data_tools.search_ledger.search_ledger import get_db_path


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class GatewaySettings(BaseModel):
    """Deployment settings for the weather gateway."""

    api_key: str | None = Field(default=None, description='OpenWeatherMap API key')
    base_url: str = BASE_URL
    db_path: str | None = None
    persist: bool = True
    host: str = 'localhost'
    port: int = 10000
    allowed_origins: list[str] = Field(default_factory=lambda: ['*'])
    db_pool_size: int = 5
    db_acquire_timeout: float = 5.0
    db_connect_attempts: int = 5
    db_connect_delay: float = 2.0

    @classmethod
    def from_env(cls) -> 'GatewaySettings':
        """Read settings from environment variables (call load_dotenv first)."""
        persist = os.getenv('WEATHER_PERSIST', '1').lower() not in ('0', 'false', 'no')

        origins = _split_origins(os.getenv('ALLOWED_ORIGINS', ''))
        frontend_url = os.getenv('FRONTEND_URL')
        if frontend_url:
            origins.append(frontend_url)

        return cls(
            api_key=os.getenv('OPENWEATHER_API_KEY'),
            base_url=os.getenv('OPENWEATHER_BASE_URL', BASE_URL),
            db_path=get_db_path() if persist else None,
            persist=persist,
            host=os.getenv('HOST', 'localhost'),
            port=int(os.getenv('PORT', '10000')),
            allowed_origins=origins or ['*'],
        )
