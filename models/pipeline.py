"""
Wires the alert pipeline components together
"""

import logging
from typing import Optional

import httpx

from config.settings import settings
from data.database import Database
from data.fetcher import AirQualityDataFetcher
from data.sms import build_sms_sender
from data.stores import AlertStore, HealthProfileStore, UserDirectory
from models.alert_dispatcher import AlertDispatcher
from models.forecaster import ForecastFetcher
from models.location import LocationResolver

logger = logging.getLogger(__name__)


class AlertPipeline:
    def __init__(self, database_url: str = None, sms_sender=None,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.db = Database(database_url)
        self.fetcher = AirQualityDataFetcher(client=http_client)
        self.resolver = LocationResolver(self.fetcher)
        self.forecaster = ForecastFetcher(self.fetcher)
        self.users = UserDirectory(self.db)
        self.health_profiles = HealthProfileStore(self.db)
        self.alerts = AlertStore(self.db)
        self.sms_sender = sms_sender or build_sms_sender()
        self.dispatcher = AlertDispatcher(
            resolver=self.resolver,
            forecaster=self.forecaster,
            users=self.users,
            health_profiles=self.health_profiles,
            alerts=self.alerts,
            sms_sender=self.sms_sender,
        )

    async def startup(self):
        for warning in settings.validate_config():
            logger.warning(warning)
        await self.db.initialize()

    async def shutdown(self):
        await self.fetcher.aclose()
        await self.db.dispose()
