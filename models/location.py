"""
Location Resolver
Turns a free-text location into coordinates and a canonical place name
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from data.fetcher import AirQualityDataFetcher
from utils.errors import LocationNotFoundError
from utils.helpers import normalize_location, extract_city_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLocation:
    latitude: float
    longitude: float
    canonical_name: str
    search_term: str
    admin1: Optional[str] = None
    country: Optional[str] = None


class LocationResolver:
    """
    Resolves user-entered places via the geocoding collaborator

    Only the first comma segment is searched for; the best candidate is the
    first one whose name, then admin region, then country equals the search
    term (case-insensitive), else the collaborator's top hit.
    """

    MATCH_FIELDS = ("name", "admin1", "country")

    def __init__(self, fetcher: AirQualityDataFetcher):
        self.fetcher = fetcher

    async def resolve(self, location_text: str) -> ResolvedLocation:
        clean_location = normalize_location(location_text)
        search_term = extract_city_name(clean_location)
        logger.info(f"Original location: {clean_location}, using city name: {search_term}")

        candidates = await self.fetcher.geocode_city(search_term) if search_term else []
        if not candidates:
            logger.error(f"Location not found: {search_term} (extracted from {clean_location})")
            raise LocationNotFoundError(clean_location, search_term)

        best = self.best_match(candidates, search_term)
        return ResolvedLocation(
            latitude=float(best["latitude"]),
            longitude=float(best["longitude"]),
            canonical_name=best.get("name") or search_term,
            search_term=search_term,
            admin1=best.get("admin1"),
            country=best.get("country"),
        )

    @classmethod
    def best_match(cls, candidates: List[Dict], search_term: str) -> Dict:
        term = search_term.lower()
        for field in cls.MATCH_FIELDS:
            for candidate in candidates:
                value = candidate.get(field)
                if value and value.lower() == term:
                    return candidate
        return candidates[0]
