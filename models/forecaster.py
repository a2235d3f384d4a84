"""
Forecast Fetcher
Retrieves and time-aligns the hourly AQI, pollutant and temperature series
for a resolved location. No thresholding happens here.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from data.fetcher import AirQualityDataFetcher
from models.location import ResolvedLocation
from utils.constants import POLLUTANTS, POLLUTANT_SERIES
from utils.errors import ForecastUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class ForecastPoint:
    """One hour of forecast data"""
    timestamp: datetime
    aqi: Optional[float]
    pollutants: Dict[str, Optional[float]]
    temperature: Optional[float] = None


@dataclass
class Forecast:
    """
    Time-aligned hourly series

    pollutants is keyed by short series name (pm2_5, pm10, co, no2, so2, o3);
    temperature holds None where the weather collaborator had no value.
    """
    times: List[datetime]
    aqi: List[Optional[float]]
    pollutants: Dict[str, List[Optional[float]]]
    temperature: List[Optional[float]]
    utc_offset_seconds: Optional[int] = None
    location_name: str = ""
    temperature_available: bool = field(default=True)

    def __len__(self) -> int:
        return len(self.times)

    def point(self, index: int) -> ForecastPoint:
        return ForecastPoint(
            timestamp=self.times[index],
            aqi=self.aqi[index],
            pollutants={name: series[index] for name, series in self.pollutants.items()},
            temperature=self.temperature[index],
        )

    def points(self) -> List[ForecastPoint]:
        return [self.point(i) for i in range(len(self))]

    def to_frame(self) -> pd.DataFrame:
        data = {"aqi": self.aqi, **self.pollutants, "temperature": self.temperature}
        return pd.DataFrame(data, index=pd.DatetimeIndex(self.times, name="time"))


def _to_optional(values) -> List[Optional[float]]:
    return [None if pd.isna(v) else float(v) for v in values]


class ForecastFetcher:
    """
    Fetches the air-quality series (required) and the temperature series
    (best effort) for coordinates and merges them on timestamp
    """

    def __init__(self, fetcher: AirQualityDataFetcher):
        self.fetcher = fetcher

    async def fetch_forecast(self, location: ResolvedLocation) -> Forecast:
        lat, lon = location.latitude, location.longitude

        aq_data = await self.fetcher.fetch_openmeteo_forecast(lat, lon)
        hourly = aq_data.get("hourly") or {}
        times = hourly.get("time") or []
        us_aqi = hourly.get("us_aqi") or []

        if not times or not us_aqi or all(v is None for v in us_aqi):
            raise ForecastUnavailableError(f"No air quality data available for {location.canonical_name}")

        n = min(len(times), len(us_aqi))
        df = pd.DataFrame({"aqi": us_aqi[:n]}, index=pd.to_datetime(times[:n]), dtype="float64")
        for source_name in POLLUTANTS:
            series = hourly.get(source_name) or []
            padded = list(series[:n]) + [None] * (n - len(series[:n]))
            df[POLLUTANT_SERIES[source_name]] = pd.Series(padded, index=df.index, dtype="float64")

        temperature, temperature_available = await self._fetch_temperature(location, df.index)
        df["temperature"] = temperature

        return Forecast(
            times=[ts.to_pydatetime() for ts in df.index],
            aqi=_to_optional(df["aqi"]),
            pollutants={name: _to_optional(df[name]) for name in POLLUTANT_SERIES.values()},
            temperature=_to_optional(df["temperature"]),
            utc_offset_seconds=aq_data.get("utc_offset_seconds"),
            location_name=location.canonical_name,
            temperature_available=temperature_available,
        )

    async def _fetch_temperature(self, location: ResolvedLocation, index: pd.DatetimeIndex):
        weather = await self.fetcher.fetch_openmeteo_temperature(location.latitude, location.longitude)
        hourly = weather.get("hourly") or {}
        times = hourly.get("time") or []
        values = hourly.get("temperature_2m") or []

        if not times or not values:
            logger.warning(f"No temperature data available for {location.canonical_name}")
            return pd.Series(np.nan, index=index, dtype="float64"), False

        n = min(len(times), len(values))
        series = pd.Series(values[:n], index=pd.to_datetime(times[:n]), dtype="float64")
        series = series[~series.index.duplicated()]
        return series.reindex(index), True
