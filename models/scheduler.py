"""
Alert Scheduler
Triggers the alert dispatcher on a fixed daily cron cadence
"""

import asyncio
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config.settings import settings
from models.alert_dispatcher import AlertDispatcher

logger = logging.getLogger(__name__)


class AlertScheduler:
    """Runs AlertDispatcher.process_alerts once per cron tick, never overlapping"""

    JOB_ID = "process_alerts"

    def __init__(self, dispatcher: AlertDispatcher, cron: str = None, timezone: Optional[str] = None):
        self.dispatcher = dispatcher
        self.cron = cron or settings.ALERT_CRON
        self.timezone = timezone or settings.ALERT_TIMEZONE
        self.scheduler = AsyncIOScheduler(timezone=self.timezone) if self.timezone else AsyncIOScheduler()

    def build_trigger(self) -> CronTrigger:
        return CronTrigger.from_crontab(self.cron, timezone=self.timezone)

    def start(self):
        """Start the scheduler (requires a running event loop)"""
        if self.scheduler.running:
            return
        self.scheduler.add_job(
            self._run,
            self.build_trigger(),
            id=self.JOB_ID,
            name="Process AQI Alerts",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        self.scheduler.start()
        logger.info(f"SMS alerts scheduled to run at '{self.cron}' daily")

    async def shutdown(self):
        if not self.scheduler.running:
            return
        self.scheduler.shutdown(wait=False)
        # newer AsyncIOScheduler releases defer the stop to the event loop
        await asyncio.sleep(0)
        logger.info("Alert scheduler stopped")

    def next_run_time(self):
        job = self.scheduler.get_job(self.JOB_ID)
        return job.next_run_time if job else None

    async def _run(self):
        logger.info("Running scheduled alerts check...")
        await self.dispatcher.process_alerts()
