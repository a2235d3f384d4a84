"""
Alert Dispatcher
Runs the alert pipeline for every eligible user:
resolve location -> fetch forecast -> scan window -> (per breach) recommend,
compose, record, send, confirm. One user's failure never aborts the batch.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from api.schemas import HealthProfile, RunSummary, UserProfile, UserRunResultOut
from config.settings import settings
from models.forecaster import Forecast, ForecastFetcher
from models.location import LocationResolver
from models.message_composer import compose_message
from utils.constants import POLLUTANTS, POLLUTANT_SERIES
from utils.errors import DeliveryError, PersistenceError
from utils.helpers import format_log_time, get_aqi_description, round_half_up

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserRunResult:
    """Outcome of one user's pipeline: alerts sent, or the error that stopped it"""
    user_id: str
    alerts_sent: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AlertDispatcher:

    def __init__(
        self,
        resolver: LocationResolver,
        forecaster: ForecastFetcher,
        users,
        health_profiles,
        alerts,
        sms_sender,
        threshold: int = None,
        window_hours: int = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.resolver = resolver
        self.forecaster = forecaster
        self.users = users
        self.health_profiles = health_profiles
        self.alerts = alerts
        self.sms_sender = sms_sender
        self.threshold = settings.ALERT_AQI_THRESHOLD if threshold is None else threshold
        self.window_hours = settings.ALERT_WINDOW_HOURS if window_hours is None else window_hours
        self.clock = clock
        self._run_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def should_alert(self, aqi: Optional[int]) -> bool:
        return aqi is not None and aqi > self.threshold

    # ==================== Run ====================

    async def process_alerts(self) -> RunSummary:
        """Process every eligible user once and return the run summary"""
        if self._run_lock.locked():
            logger.warning("Alert run already in progress, skipping this trigger")
            now = self.clock()
            return RunSummary(started_at=now, finished_at=now, skipped=True)

        async with self._run_lock:
            summary = RunSummary(started_at=self.clock())
            logger.info("=== AQI Alert System Started ===")

            try:
                users = await self.users.find_alert_recipients()
            except PersistenceError:
                logger.exception("Failed to load users for alert run")
                summary.finished_at = self.clock()
                return summary

            results = []
            for user in users:
                results.append(await self.process_user(user))

            summary.results = [
                UserRunResultOut(user_id=r.user_id, alerts_sent=r.alerts_sent, error=r.error)
                for r in results
            ]
            summary.users_processed = len(results)
            summary.users_failed = sum(1 for r in results if not r.ok)
            summary.total_alerts_sent = sum(r.alerts_sent for r in results)
            summary.finished_at = self.clock()

            logger.info("=== Alert Processing Summary ===")
            logger.info(
                f"Users processed: {summary.users_processed}, failed: {summary.users_failed}, "
                f"total alerts sent across all users: {summary.total_alerts_sent}"
            )
            return summary

    async def process_user(self, user: UserProfile) -> UserRunResult:
        """Run the pipeline for one user; any exception is captured on the result"""
        result = UserRunResult(user_id=user.id)
        try:
            await self._run_user_pipeline(user, result)
        except Exception as e:
            logger.exception(f"Error processing alerts for user {user.id}")
            result.error = f"{type(e).__name__}: {e}"
        return result

    async def _run_user_pipeline(self, user: UserProfile, result: UserRunResult):
        logger.info(f"Processing user {user.id} ({user.full_name}) at location '{user.location}'")

        location = await self.resolver.resolve(user.location)
        forecast = await self.forecaster.fetch_forecast(location)

        start = self.find_start_index(forecast, self.local_now(forecast))
        end = min(start + self.window_hours, len(forecast))
        logger.info(f"Processing forecast data starting from index {start} ({forecast.times[start]:%Y-%m-%d %H:%M})")

        profile = None
        for i in range(start, end):
            aqi = round_half_up(forecast.aqi[i])
            logger.debug(f"Checking forecast for {forecast.times[i]}, AQI: {aqi}")
            if not self.should_alert(aqi):
                continue

            if profile is None:
                profile = await self._load_health_profile(user)

            if await self._dispatch_breach(user, forecast, i, aqi, profile):
                result.alerts_sent += 1

        if result.alerts_sent == 0:
            logger.info(f"No alerts needed for user {user.id}")

    # ==================== Window scan ====================

    def local_now(self, forecast: Forecast) -> datetime:
        """Wall-clock time at the forecast location (naive, like the forecast times)"""
        now = self.clock()
        if now.tzinfo is None:
            return now
        if forecast.utc_offset_seconds is not None:
            return (now.astimezone(timezone.utc) + timedelta(seconds=forecast.utc_offset_seconds)).replace(tzinfo=None)
        return now.astimezone().replace(tzinfo=None)

    @staticmethod
    def find_start_index(forecast: Forecast, now: datetime) -> int:
        """Index of the forecast hour matching now's date and hour, else 0"""
        for i, ts in enumerate(forecast.times):
            if ts.date() == now.date() and ts.hour == now.hour:
                return i
        return 0

    # ==================== Per breach ====================

    async def _load_health_profile(self, user: UserProfile) -> HealthProfile:
        try:
            profile = await self.health_profiles.latest_for_user(user.id)
        except PersistenceError:
            logger.exception(f"Error fetching health assessment for user {user.id}, using defaults")
            return HealthProfile()

        if profile is None:
            logger.info(f"No health assessment found for user {user.id}, using default values")
            return HealthProfile()
        logger.info(f"Found health assessment for user {user.id}")
        return profile

    async def _dispatch_breach(
        self, user: UserProfile, forecast: Forecast, index: int, aqi: int, profile: HealthProfile
    ) -> bool:
        timestamp = forecast.times[index]
        temperature = forecast.temperature[index]
        pollutants = {
            meta["key"]: round_half_up(forecast.pollutants[POLLUTANT_SERIES[source]][index])
            for source, meta in POLLUTANTS.items()
        }

        composed = compose_message(
            user.location,
            timestamp,
            aqi,
            pollutants,
            profile.symptoms,
            profile.condition_names,
            profile.age,
            temperature,
        )

        logger.info(
            f"Alert for {format_log_time(timestamp)}: AQI {aqi} ({get_aqi_description(aqi)}), "
            f"temperature {'N/A' if temperature is None else str(round_half_up(temperature)) + '°C'}, "
            f"symptoms: {', '.join(profile.symptoms) or 'none'}, "
            f"chronic diseases: {', '.join(profile.condition_names) or 'none'}, age: {profile.age}, "
            f"mask: {composed.recommendation.status.value}"
        )

        already_sent = False
        try:
            _, already_sent = await self.alerts.record_attempt(
                user.id, user.location, aqi, pollutants, timestamp
            )
        except PersistenceError:
            logger.exception(f"Error storing alert for user {user.id} at {timestamp}")

        if already_sent:
            logger.info(f"Alert for user {user.id} at {timestamp} already sent, skipping")
            return False

        try:
            await self.sms_sender.send(composed.text, user.phone)
        except DeliveryError as e:
            logger.error(f"SMS delivery failed for user {user.id} at {timestamp}: {e}")
            return False
        logger.info(f"Message sent successfully to user {user.id}")

        try:
            await self.alerts.mark_sent(user.id, timestamp, self.clock())
        except PersistenceError:
            logger.exception(f"Error marking alert sent for user {user.id} at {timestamp}")
        return True
