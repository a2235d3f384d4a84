"""
Open-Meteo Data Fetcher
Geocoding, hourly air quality and hourly temperature from Open-Meteo
(free, no API key needed)
"""

import logging
from typing import Dict, List, Optional

import httpx

from config.settings import settings
from utils.constants import AIR_QUALITY_HOURLY_FIELDS
from utils.errors import GeocodingUnavailableError

logger = logging.getLogger(__name__)


class AirQualityDataFetcher:
    """Fetcher for the geocoding, air quality and weather collaborators"""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = None):
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.client = client or httpx.AsyncClient(timeout=self.timeout)

        # Base URLs
        self.geocoding_url = settings.GEOCODING_URL
        self.air_quality_url = settings.AIR_QUALITY_URL
        self.weather_url = settings.WEATHER_URL

    async def aclose(self):
        await self.client.aclose()

    async def _get_json(self, url: str, params: Dict) -> Dict:
        response = await self.client.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    # ==================== Geocoding ====================

    async def geocode_city(self, city: str, count: int = None) -> List[Dict]:
        """
        Search place names

        Returns:
            Ranked candidates with name, admin1, country, latitude, longitude;
            [] when the place is unknown

        Raises:
            GeocodingUnavailableError: transport failure or error response
        """
        params = {
            "name": city,
            "count": count or settings.GEOCODING_RESULT_COUNT,
            "language": settings.GEOCODING_LANGUAGE,
        }

        try:
            data = await self._get_json(self.geocoding_url, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Geocode error for {city}: {e}")
            raise GeocodingUnavailableError(f"Geocoding service unavailable for {city}: {e}") from e

        return data.get("results") or []

    # ==================== Open-Meteo ====================

    async def fetch_openmeteo_forecast(self, lat: float, lon: float, days: int = None) -> Dict:
        """
        Fetch hourly US AQI and pollutant concentrations

        Returns:
            Open-Meteo payload ({"hourly": {...}, "utc_offset_seconds": ...}),
            or {} when the request failed
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": ",".join(AIR_QUALITY_HOURLY_FIELDS),
            "forecast_days": days or settings.FORECAST_DAYS,
            "timezone": "auto",
        }

        try:
            return await self._get_json(self.air_quality_url, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Open-Meteo air quality error at {lat:.4f}, {lon:.4f}: {e}")
            return {}

    async def fetch_openmeteo_temperature(self, lat: float, lon: float, days: int = None) -> Dict:
        """
        Fetch hourly 2m temperature (°C)

        Returns:
            Open-Meteo payload, or {} when the request failed
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": "temperature_2m",
            "forecast_days": days or settings.FORECAST_DAYS,
            "timezone": "auto",
        }

        try:
            return await self._get_json(self.weather_url, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Open-Meteo weather error at {lat:.4f}, {lon:.4f}: {e}")
            return {}
